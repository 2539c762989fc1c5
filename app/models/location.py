from sqlmodel import Field, SQLModel


class Country(SQLModel, table=True):
    __tablename__ = "countries"
    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(unique=True)


class FirstLevelDivision(SQLModel, table=True):
    """State / province / region a customer address belongs to."""

    __tablename__ = "first_level_divisions"
    id: int | None = Field(default=None, primary_key=True)
    name: str
    country_id: int = Field(foreign_key="countries.id", index=True)


class CountryPublic(SQLModel):
    id: int
    name: str


class DivisionPublic(SQLModel):
    id: int
    name: str
    country_id: int
