"""Dashboard package namespace.

Streamlit pages built on ``linkedcharts``. Each component exposes pure
figure builders (plain Plotly figures, easy to test) and a ``render_panel``
function that wires them to Streamlit widgets and returns a status dict.
"""
