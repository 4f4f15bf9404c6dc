from __future__ import annotations

import sys

from binary2treemap.main import main

sys.exit(main())
