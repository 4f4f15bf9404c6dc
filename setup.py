# setup.py
from setuptools import setup, find_packages

setup(
    name="binary2treemap",
    version="0.2.0",
    description="Create a treemap of the source code of each byte in a binary",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.8",
    install_requires=[
        "pyelftools>=0.29",  # DWARF line programs
        "bottle>=0.12",  # Web UI
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "requests>=2.28",
        ],
    },
    entry_points={
        'console_scripts': [
            'binary2treemap=binary2treemap.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
