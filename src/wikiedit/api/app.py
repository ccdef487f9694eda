"""FastAPI application for the wikiedit local JSON API."""

import re
import secrets
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Security
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, Field

from .. import __version__
from ..core.model import ReferenceItem
from ..locate import locate_section, locate_template
from ..runtime import Runtime


class WikitextBody(BaseModel):
    wikitext: str = ""


class HtmlBody(BaseModel):
    html: str = ""


class TemplateQuery(BaseModel):
    text: str
    name: str = Field(..., min_length=1)


class SectionQuery(BaseModel):
    text: str
    title: str = Field(..., min_length=1)
    regex: bool = False


class ReferenceText(BaseModel):
    text: str = ""


class ReferenceItems(BaseModel):
    items: list[dict[str, Any]] = Field(default_factory=list)


def create_app(runtime: Runtime, token: str | None = None, enable_cors: bool = False) -> FastAPI:
    """
    Create FastAPI application with runtime injected.

    Args:
        runtime: Runtime instance with codecs and config
        token: Bearer token for authentication (None to disable auth)
        enable_cors: Enable CORS middleware

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="wikiedit API",
        description="Local JSON API for wikitext conversion and template location",
        version=__version__,
        docs_url="/docs" if token is None else None,
        redoc_url="/redoc" if token is None else None,
    )

    if enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    if token:
        security_scheme = HTTPBearer(auto_error=False)

        async def verify_token(
            credentials: HTTPAuthorizationCredentials | None = Security(security_scheme),  # noqa: B008
        ) -> None:
            """Verify bearer token."""
            if credentials is None or credentials.credentials != token:
                raise HTTPException(status_code=401, detail="Invalid or missing token")
    else:

        async def verify_token() -> None:
            """No-op when auth is disabled."""
            return None

    @app.get("/health")
    async def health(auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Health check endpoint."""
        return {"status": "ok", "version": __version__}

    @app.post("/convert/html")
    async def convert_to_html(body: WikitextBody, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Convert wikitext to WYSIWYG HTML."""
        return {"html": runtime.wikitext_to_html(body.wikitext)}

    @app.post("/convert/wikitext")
    async def convert_to_wikitext(body: HtmlBody, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Convert WYSIWYG HTML to wikitext."""
        return {"wikitext": runtime.html_to_wikitext(body.html)}

    @app.post("/locate/template")
    async def locate_template_endpoint(
        query: TemplateQuery, auth: None = Depends(verify_token)
    ) -> dict[str, Any]:
        """Locate the first occurrence of a template."""
        location = locate_template(query.text, query.name)
        if not location:
            raise HTTPException(status_code=404, detail=f"Template {query.name} not found")
        return location

    @app.post("/locate/section")
    async def locate_section_endpoint(
        query: SectionQuery, auth: None = Depends(verify_token)
    ) -> dict[str, Any]:
        """Locate a header-delimited section."""
        try:
            location = locate_section(query.text, query.title, regex=query.regex)
        except re.error as e:
            raise HTTPException(status_code=400, detail=f"Invalid header pattern: {e}") from e
        if not location:
            raise HTTPException(status_code=404, detail=f"Section {query.title} not found")
        return location

    @app.post("/references/parse")
    async def parse_references(body: ReferenceText, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Split a reference field into typed items."""
        items = runtime.references.parse(body.text)
        return {"items": [item.to_dict() for item in items]}

    @app.post("/references/serialize")
    async def serialize_references(body: ReferenceItems, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Render reference items back to wikitext."""
        try:
            items = [
                ReferenceItem.from_dict(data, id=runtime.references.idgen.new_id())
                for data in body.items
            ]
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e)) from e
        return {"text": runtime.references.serialize(items)}

    return app


def generate_token() -> str:
    """Generate a random bearer token."""
    return secrets.token_urlsafe(32)
