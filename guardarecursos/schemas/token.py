from pydantic import BaseModel

# Schema para la respuesta del endpoint de login
class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

# Schema para los datos contenidos dentro del JWT (payload)
class TokenPayload(BaseModel):
    sub: int
