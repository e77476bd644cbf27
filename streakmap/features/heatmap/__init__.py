from streakmap.features.heatmap.service import build_heatmap

__all__ = ["build_heatmap"]
