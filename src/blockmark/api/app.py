"""FastAPI application exposing the block engine as a local JSON API.

The API is stateless: every request carries the document it operates on as
{"blocks": [{"id": ..., "source": ...}, ...]} and gets the new document back.
"""

import logging
import secrets
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Security
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, Field

from .. import __version__
from ..adapters.json_codec import document_from_dict, document_to_dict
from ..core.model import Document
from ..core.refs import collect_links, collect_tags, collect_wiki_links
from ..core.serializer import to_markdown
from ..errors import DocumentFormatError

logger = logging.getLogger(__name__)


class BlockRef(BaseModel):
    id: str
    source: str


class DocumentIn(BaseModel):
    blocks: list[BlockRef] = Field(default_factory=list)


class ParseRequest(BaseModel):
    text: str | None = None


class DocumentRequest(BaseModel):
    document: DocumentIn


class BlockRequest(DocumentRequest):
    block_id: str


class UpdateRequest(BlockRequest):
    source: str


class SplitRequest(BlockRequest):
    content: str
    cursor: int


class MergeRequest(BlockRequest):
    content: str


class CommitRequest(BlockRequest):
    value: str


class InsertRequest(DocumentRequest):
    after: str | None = None
    image_key: str | None = None
    alt_text: str = ""


def create_app(runtime: Any, token: str | None = None, enable_cors: bool = False) -> FastAPI:
    """
    Create FastAPI application with runtime injected.

    Args:
        runtime: Runtime instance with parser and editor
        token: Bearer token for authentication (None to disable auth)
        enable_cors: Enable CORS middleware

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="Blockmark API",
        description="Local JSON API for the blockmark document engine",
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

    parser = runtime.parser
    editor = runtime.editor

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

    def load(doc: DocumentIn) -> Document:
        try:
            return document_from_dict(doc.model_dump(), parser)
        except DocumentFormatError as e:
            raise HTTPException(status_code=422, detail=str(e)) from e

    def require_block(document: Document, block_id: str) -> None:
        if document.find_block(block_id) is None:
            raise HTTPException(status_code=404, detail=f"Block {block_id} not found")

    @app.get("/health")
    async def health(auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Health check endpoint."""
        return {"status": "ok", "version": __version__}

    @app.post("/parse")
    async def parse(req: ParseRequest, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Parse markdown text into a document."""
        return document_to_dict(parser.parse(req.text))

    @app.post("/serialize")
    async def serialize(req: DocumentRequest, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Render a document back to markdown."""
        return {"text": to_markdown(load(req.document))}

    @app.post("/blocks/source")
    async def block_source(req: BlockRequest, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Raw source of one block."""
        document = load(req.document)
        source = document.block_source(req.block_id)
        if source is None:
            raise HTTPException(status_code=404, detail=f"Block {req.block_id} not found")
        return {"block_id": req.block_id, "source": source}

    @app.post("/blocks/update")
    async def update(req: UpdateRequest, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Replace one block's source, keeping its id."""
        document = load(req.document)
        require_block(document, req.block_id)
        return document_to_dict(editor.update_block(document, req.block_id, req.source))

    @app.post("/blocks/split")
    async def split(req: SplitRequest, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Split a block at a character offset."""
        result = editor.split_block(load(req.document), req.block_id, req.content, req.cursor)
        if result is None:
            raise HTTPException(status_code=404, detail=f"Block {req.block_id} not found")
        return {
            "document": document_to_dict(result.document),
            "new_block_id": result.new_block_id,
        }

    @app.post("/blocks/merge")
    async def merge(req: MergeRequest, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Merge a block into its previous sibling."""
        document = load(req.document)
        result = editor.merge_with_previous(document, req.block_id, req.content)
        if result is None:
            return {"applicable": False, "document": document_to_dict(document)}
        return {
            "applicable": True,
            "document": document_to_dict(result.document),
            "merged_into_id": result.merged_into_id,
            "cursor_offset": result.cursor_offset,
        }

    @app.post("/blocks/remove")
    async def remove(req: BlockRequest, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Remove a block; unknown ids leave the document unchanged."""
        return document_to_dict(editor.remove_block(load(req.document), req.block_id))

    @app.post("/blocks/insert")
    async def insert(req: InsertRequest, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Insert an empty paragraph, or an image block when image_key is given."""
        document = load(req.document)
        if req.image_key:
            result = editor.new_image_block(
                document, req.image_key, alt_text=req.alt_text, after=req.after
            )
        else:
            result = editor.new_block(document, after=req.after)
        if result is None:
            if req.after is not None and document.find_block(req.after) is None:
                raise HTTPException(status_code=404, detail=f"Block {req.after} not found")
            raise HTTPException(
                status_code=422, detail="image_key and alt_text do not form an image source"
            )
        return {"document": document_to_dict(result.document), "block_id": result.block_id}

    @app.post("/blocks/commit")
    async def commit(req: CommitRequest, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Apply a block's final value on blur."""
        document = load(req.document)
        return document_to_dict(editor.commit_block(document, req.block_id, req.value))

    @app.post("/refs")
    async def refs(req: DocumentRequest, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Tags, wiki-links and links referenced by a document."""
        document = load(req.document)
        return {
            "tags": collect_tags(document),
            "wiki_links": collect_wiki_links(document),
            "links": collect_links(document),
        }

    logger.debug("created API app (auth=%s, cors=%s)", bool(token), enable_cors)
    return app


def generate_token() -> str:
    """Generate a random bearer token."""
    return secrets.token_urlsafe(32)
