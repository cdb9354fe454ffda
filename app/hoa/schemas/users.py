from pydantic import BaseModel, ConfigDict, Field


class CreateUserRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(min_length=3)
    password: str = Field(min_length=1)
    first_name: str = Field(alias="firstName", min_length=1)
    last_name: str = Field(default="", alias="lastName")
    association_id: str = Field(alias="associationId", min_length=1)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class CreatedUserOut(BaseModel):
    id: str
    email: str | None = None


class CreateUserResponse(BaseModel):
    success: bool = True
    user: CreatedUserOut


class DeleteUserRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId", min_length=1)


class DeleteUserResponse(BaseModel):
    success: bool = True
