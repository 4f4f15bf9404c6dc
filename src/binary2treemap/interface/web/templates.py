from __future__ import annotations

"""
HTML templates for the web interface (bottle SimpleTemplate syntax).
"""

TREEMAP_PAGE = """<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{{title}} - binary2treemap</title>
<style>
  body { font-family: sans-serif; margin: 0; }
  header { padding: 8px 12px; background: #2b303b; color: #eff1f5; }
  header a { color: #8fa1b3; }
  #chart { width: 100vw; height: calc(100vh - 40px); }
  .cell text { font-size: 11px; pointer-events: none; }
</style>
<script src="{{d3_url}}"></script>
</head>
<body>
<header>
  <a href="/">{{root_name}}</a>
% for crumb_name, crumb_href in crumbs:
  / <a href="{{crumb_href}}">{{crumb_name}}</a>
% end
  ({{size}} bytes)
</header>
<div id="chart"></div>
<script>
const basePath = {{!base_path_json}};
const dataUrl = {{!data_url_json}};
fetch(dataUrl).then(r => r.json()).then(data => {
  const el = document.getElementById("chart");
  const width = el.clientWidth, height = el.clientHeight;
  const root = d3.hierarchy(data).sum(d => d.value || 0)
      .sort((a, b) => b.value - a.value);
  d3.treemap().size([width, height]).paddingInner(1).paddingTop(14)(root);
  const color = d3.scaleOrdinal(d3.schemeTableau10);
  const svg = d3.select(el).append("svg").attr("width", width).attr("height", height);
  const cell = svg.selectAll("g").data(root.descendants().slice(1)).join("g")
      .attr("class", "cell")
      .attr("transform", d => `translate(${d.x0},${d.y0})`)
      .style("cursor", "pointer")
      .on("click", (event, d) => {
        event.stopPropagation();
        const parts = d.ancestors().reverse().slice(1).map(n => n.data.name);
        window.location.href = "/" + [basePath, ...parts].filter(Boolean).join("/");
      });
  cell.append("rect")
      .attr("width", d => d.x1 - d.x0)
      .attr("height", d => d.y1 - d.y0)
      .attr("fill", d => color(d.ancestors().reverse()[1]?.data.name))
      .attr("fill-opacity", d => d.children ? 0.35 : 0.8);
  cell.append("title").text(d => `${d.data.name}\\n${d.value} bytes`);
  cell.append("text").attr("x", 3).attr("y", 11)
      .text(d => (d.x1 - d.x0 > 40) ? `${d.data.name} (${d.value})` : "");
});
</script>
</body>
</html>
"""

SOURCE_PAGE = """<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{{title}} - binary2treemap</title>
<style>
  body { font-family: monospace; background: #2b303b; color: #c0c5ce; }
  .bytes { color: #ebcb8b; display: inline-block; min-width: 6em; text-align: right; }
  .nbr { color: #65737e; display: inline-block; min-width: 5em; text-align: right; }
  pre { margin: 0; }
</style>
</head>
<body>
<p>{{source_path}}: {{size}} bytes ({{unattributed}} without line information)</p>
<pre>
% for nbr, count, text in rows:
<span class="bytes">{{count if count else ""}}</span><span class="nbr">{{nbr}}</span>  {{text}}
% end
</pre>
</body>
</html>
"""

DEBUG_PAGE = """<!doctype html>
<html lang="en">
<head><meta charset="utf-8"><title>debug - binary2treemap</title></head>
<body>
<pre>
{{header}}
% for line in lines:
{{line}}
% end
</pre>
</body>
</html>
"""

NOT_FOUND_PAGE = """<!doctype html>
<html lang="en">
<head><meta charset="utf-8"><title>Not found - binary2treemap</title></head>
<body>
<p>ERROR: No attributed bytes at <code>{{path}}</code>.</p>
<p>Browse from the <a href="/">root</a> or inspect the <a href="/__debug__">full tree</a>.</p>
</body>
</html>
"""
