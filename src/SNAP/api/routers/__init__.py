from . import auth, dashboard, events, expenses, health, records, students

__all__ = ["auth", "dashboard", "events", "expenses", "health", "records", "students"]
