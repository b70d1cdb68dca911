"""FastAPI application entry point for the case assistant backend."""

import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from shared.logging.logging_setup import setup_logging
from shared.helper.HelperConfig import HelperConfig
from shared.clients.embed.EmbedClientInterface import EmbedClientInterface
from shared.clients.store.StoreClientInterface import StoreClientInterface
from shared.clients.llm.LLMClientInterface import LLMClientInterface
from shared.clients.embed.EmbedClientManager import EmbedClientManager
from shared.clients.embed.EmbeddingProvider import EmbeddingProvider
from shared.clients.store.StoreClientManager import StoreClientManager
from shared.clients.llm.LLMClientManager import LLMClientManager
from services.kb_ingest.IngestService import IngestService
from server.core.HybridRetriever import HybridRetriever
from server.core.ChatService import ChatService
from server.models.responses import HealthResponse
from server.routers.ChatRouter import router as chat_router
from server.routers.SearchRouter import router as search_router
from server.routers.UploadRouter import router as upload_router
from server.routers.DocumentsRouter import router as documents_router

logging = setup_logging()
app_version = os.getenv("APP_VERSION", "unknown")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # when the app starts
    app.state.logging = logging
    app.state.helper_config = HelperConfig(logger=logging)

    embed_clients = EmbedClientManager(helper_config=app.state.helper_config).get_clients()
    store_client = StoreClientManager(helper_config=app.state.helper_config).get_client()
    llm_client = LLMClientManager(helper_config=app.state.helper_config).get_client()

    logging.info("Booting all clients...")
    for client in [*embed_clients, store_client, llm_client]:
        await client.boot()
    logging.info("All clients booted successfully.", color="green")

    app.state.embed_clients = embed_clients
    app.state.store_client = store_client
    app.state.llm_client = llm_client

    embedding_provider = EmbeddingProvider(helper_config=app.state.helper_config, embed_clients=embed_clients)
    app.state.retriever = HybridRetriever(
        helper_config=app.state.helper_config,
        embedding_provider=embedding_provider,
        store_client=store_client,
    )
    app.state.chat_service = ChatService(
        helper_config=app.state.helper_config,
        retriever=app.state.retriever,
        llm_client=llm_client,
    )
    app.state.ingest_service = IngestService(
        helper_config=app.state.helper_config,
        embedding_provider=embedding_provider,
        store_client=store_client,
    )

    try:
        await check_connections(embed_clients, store_client, llm_client)

        # while the app is running...
        yield
    finally:
        # when the app shuts down, close all client connections
        logging.info("Shutting down — closing all clients...")
        for client in [*embed_clients, store_client, llm_client]:
            await client.close()
        logging.info("All clients closed.")


app = FastAPI(
    title="case_assistant",
    description=(
        "Retrieval-augmented legal assistant for a single court case. "
        "Answers questions via POST /chat using hybrid (vector, full-text, substring) "
        "search over the case knowledge base; documents are added via POST /upload."
    ),
    version=app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(chat_router)
app.include_router(search_router)
app.include_router(upload_router)
app.include_router(documents_router)


@app.get("/health", tags=["health"])
async def health(request: Request) -> HealthResponse:
    """Liveness probe listing the configured engines."""
    return HealthResponse(
        status="ok",
        version=app_version,
        embed_engines=[client.get_engine_name() for client in request.app.state.embed_clients],
        store_engine=request.app.state.store_client.get_engine_name(),
        llm_engine=request.app.state.llm_client.get_engine_name(),
    )


async def check_connections(
    embed_clients: list[EmbedClientInterface],
    store_client: StoreClientInterface,
    llm_client: LLMClientInterface,
) -> None:
    """Check connectivity to all configured backends on startup.

    Embedding failures are non-fatal (retrieval degrades to keyword search).
    Store and LLM failures are fatal.

    Raises:
        RuntimeError: If a critical service (store or LLM) is not reachable.
    """
    for client in embed_clients:
        try:
            result: httpx.Response = await client.do_healthcheck()
        except httpx.HTTPError as exc:
            logging.warning("Embed client '%s' is not reachable: %s. Vector search may be unavailable.", client.get_engine_name(), exc)
            continue
        if not result.is_success:
            logging.warning(
                "Embed client '%s' is not reachable (status %d). Vector search may be unavailable.",
                client.get_engine_name(),
                result.status_code,
            )

    result = await store_client.do_healthcheck()
    if not result.is_success:
        raise RuntimeError(
            f"Store client '{store_client.get_engine_name()}' is not reachable "
            f"(status {result.status_code}). Cannot serve queries."
        )

    result = await llm_client.do_healthcheck()
    if not result.is_success:
        raise RuntimeError(
            f"LLM client '{llm_client.get_engine_name()}' is not reachable (status {result.status_code}). "
            "Chat will not work."
        )


if __name__ == "__main__":
    import uvicorn

    logging.info(
        "Starting case_assistant API Server v%s from root dir: %s on port %s...",
        app_version,
        os.environ.get("ROOT_DIR", os.getcwd()),
        os.getenv("APP_PORT", "8000"),
    )
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("APP_PORT", "8000")))
