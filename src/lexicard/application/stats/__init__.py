# Application Stats Package
from .dashboard import DashboardCalculator, DashboardStats, calculate_dashboard_stats
from .knowledge_graph import generate_knowledge_graph, mastery_level

__all__ = [
    "DashboardCalculator",
    "DashboardStats",
    "calculate_dashboard_stats",
    "generate_knowledge_graph",
    "mastery_level",
]
