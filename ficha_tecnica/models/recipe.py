"""Recipe Pydantic models."""

import base64
from pathlib import Path
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TextSource(BaseModel):
    """Recipe pasted as plain text."""

    kind: Literal["text"] = "text"
    text: str


class LinkSource(BaseModel):
    """Recipe published at a URL."""

    kind: Literal["link"] = "link"
    url: str


class ImageSource(BaseModel):
    """Photo of a recipe."""

    kind: Literal["image"] = "image"
    data: bytes
    content_type: Optional[str] = None
    filename: Optional[str] = None


RecipeSource = Union[TextSource, LinkSource, ImageSource]


class Ingredient(BaseModel):
    """Single ingredient row of the technical sheet."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., alias="nome", description="Ingredient name")
    gross_quantity: Optional[float] = Field(
        None, alias="qtdBruta", description="Gross quantity, before trimming/peeling"
    )
    net_quantity: Optional[float] = Field(
        None, alias="qtdLiquida", description="Net quantity actually used"
    )
    price: Optional[float] = Field(None, alias="preco", description="Price, when known")


class StructuredRecipe(BaseModel):
    """Recipe data as returned by the structuring prompt."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "nomeReceita": "Bolo de Cenoura",
                "ingredientes": [
                    {"nome": "Cenoura", "qtdBruta": 300, "qtdLiquida": 250, "preco": None},
                    {"nome": "Farinha de trigo", "qtdBruta": 240, "qtdLiquida": 240, "preco": 1.8},
                ],
                "modoPreparo": "Bata a cenoura com os ovos e o óleo. Misture a farinha e asse.",
                "avisos": ["Preço da cenoura não informado"],
            }
        },
    )

    name: str = Field(..., alias="nomeReceita", description="Recipe name")
    ingredients: List[Ingredient] = Field(default_factory=list, alias="ingredientes")
    preparation_text: str = Field("", alias="modoPreparo", description="Full preparation method")
    warnings: List[str] = Field(default_factory=list, alias="avisos")

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("recipe name must not be empty")
        return value


class GeneratedFile(BaseModel):
    """A filled technical sheet."""

    file_name: str
    content: bytes
    path: Optional[Path] = None

    @property
    def base64_data(self) -> str:
        return base64.b64encode(self.content).decode("ascii")


class FilePayload(BaseModel):
    """Spreadsheet returned inline to the browser."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., alias="nome")
    data: str = Field(..., alias="dados", description="Base64 encoded .xlsx")


class ProcessRecipeResponse(BaseModel):
    """Envelope returned by POST /api/processar-receita."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = Field(True, alias="sucesso")
    recipe_name: str = Field(..., alias="nomeReceita")
    warnings: List[str] = Field(default_factory=list, alias="avisos")
    file: FilePayload = Field(..., alias="arquivo")
