from pydantic import BaseModel


class CustomerDeleted(BaseModel):
    customer_id: int
    appointments_deleted: int
