# calendar heatmap of daily max/min temperatures, rendered with plotly

__version__ = "0.1.0"
