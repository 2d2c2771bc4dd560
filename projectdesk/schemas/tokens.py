# projectdesk/schemas/tokens.py
from pydantic import BaseModel
from projectdesk.schemas.user import UserOut


class Token(BaseModel):
    message: str = "Login successful"
    access_token: str
    token_type: str
    user: UserOut

    model_config = {
        "from_attributes": True
    }
