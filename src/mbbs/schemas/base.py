from pydantic import BaseModel, ConfigDict

class ORMBase(BaseModel):
    """Response schema readable from either ORM rows or plain dicts.

    Rows (users, posts, categories) are validated by attribute; thread views
    are assembled as dicts by the service layer and validated by key.
    """
    model_config = ConfigDict(from_attributes=True, use_enum_values=True)
