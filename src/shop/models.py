from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Theme(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    price: int = 0
    primary: str = ""
    subprimary: str = ""
    secondary: str = ""
    subsecondary: str = ""
    background: str = ""
    subbackground: str = ""
    text: str = ""
    subtext: str = ""
    pie1: str = ""
    pie2: str = ""
    unlocked: bool = False
    user_id: int | None = None
