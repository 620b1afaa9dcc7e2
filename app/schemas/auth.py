from pydantic import BaseModel, Field

class LoginIn(BaseModel):
    # comparado byte a byte com o email gravado
    email: str = Field(..., min_length=1, max_length=320)
    senha: str = Field(..., min_length=1, max_length=256)
