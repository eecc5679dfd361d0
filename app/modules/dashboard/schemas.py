from pydantic import BaseModel


class DashboardMetrics(BaseModel):
    suppliers_count: int
    products_count: int
    ai_credits: int
    open_tickets: int
