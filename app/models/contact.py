from sqlmodel import Field, SQLModel


class Contact(SQLModel, table=True):
    __tablename__ = "contacts"
    id: int | None = Field(default=None, primary_key=True)
    name: str
    email: str | None = None


class ContactPublic(SQLModel):
    id: int
    name: str
    email: str | None = None
