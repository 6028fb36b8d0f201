"""Recipe processing endpoint."""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from ficha_tecnica.api.dependencies import get_pipeline
from ficha_tecnica.middleware.rate_limit import rate_limit_dependency
from ficha_tecnica.models.recipe import FilePayload, ProcessRecipeResponse
from ficha_tecnica.services.input_resolver import build_source
from ficha_tecnica.services.pipeline import TechnicalSheetPipeline
from ficha_tecnica.utils.exceptions import FichaTecnicaException, PipelineError

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["recipes"])


async def _read_json_body(request: Request) -> Dict[str, Any]:
    try:
        body = await request.json()
    except ValueError:
        logger.warning("Ignoring unparseable JSON body")
        return {}
    return body if isinstance(body, dict) else {}


async def _discard_upload(upload: Optional[UploadFile]) -> None:
    """Close the upload, removing its spooled temp file. Failures are only logged."""
    if upload is None:
        return
    try:
        await upload.close()
    except Exception as e:
        logger.warning("Could not discard uploaded file %s: %s", upload.filename, e)


@router.post("/processar-receita", response_model=ProcessRecipeResponse)
async def process_recipe(
    request: Request,
    texto: Optional[str] = Form(None),
    link: Optional[str] = Form(None),
    imagem: Optional[UploadFile] = File(None, description="Recipe photo (JPEG or PNG, max 10MB)"),
    _: None = Depends(rate_limit_dependency),
    pipeline: TechnicalSheetPipeline = Depends(get_pipeline),
) -> ProcessRecipeResponse:
    """
    Turn a recipe into a filled technical sheet.

    Accepts exactly one of:
    - `texto`: pasted recipe text
    - `link`: URL of a recipe page
    - `imagem`: photo of a recipe (multipart file)

    Text and link may also be sent as a JSON body: `{"texto": "..."}` or
    `{"link": "..."}`.
    """
    if "application/json" in request.headers.get("content-type", "").lower():
        body = await _read_json_body(request)
        texto, link = body.get("texto"), body.get("link")

    try:
        # One byte past the limit is enough for the size check to reject it.
        image_data = (
            await imagem.read(pipeline.max_upload_size + 1) if imagem is not None else None
        )

        logger.info(
            "Route /api/processar-receita called",
            extra={
                "route": "/api/processar-receita",
                "params": {
                    "texto_chars": len(texto) if isinstance(texto, str) else None,
                    "link": link[:200] if isinstance(link, str) else None,
                    "imagem": imagem.filename if imagem is not None else None,
                },
            },
        )

        source = build_source(
            text=texto if isinstance(texto, str) else None,
            link=link if isinstance(link, str) else None,
            image=image_data,
            content_type=imagem.content_type if imagem is not None else None,
            filename=imagem.filename if imagem is not None else None,
        )
        result = await pipeline.process(source)

    except FichaTecnicaException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error in process_recipe: {str(e)}", exc_info=True)
        raise PipelineError(str(e)) from e
    finally:
        await _discard_upload(imagem)

    return ProcessRecipeResponse(
        success=True,
        recipe_name=result.recipe.name,
        warnings=result.recipe.warnings,
        file=FilePayload(name=result.file.file_name, data=result.file.base64_data),
    )
