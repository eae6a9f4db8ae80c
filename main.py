from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pymongo.errors import PyMongoError
from dotenv import load_dotenv
import copy
import os
import traceback

from models import NormalizeRequest, NormalizeUrlRequest, CoerceRequest
from Services.dimension_normalizer import normalize_dimensions_for_satori, to_number_if_possible
from Services.tree_service import get_remote_tree
from storedb import ensure_indexes, tree_cache_key, get_cached_tree, save_normalized_tree

load_dotenv()

CORS_ALLOW_ORIGINS = [
    o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        ensure_indexes()
    except PyMongoError as e:
        print("[CACHE ERROR] index setup failed:", e)
    yield


app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _normalize_with_cache(tree, use_cache: bool) -> dict:
    if tree is None:
        return {"tree": None, "cached": False}

    # -------- 1. Cache --------
    tree_key = tree_cache_key(tree)
    if use_cache:
        cached = get_cached_tree(tree_key)
        if cached and "normalized_tree" in cached:
            print("[CACHE] Using stored normalized tree", tree_key)
            return {"tree": cached["normalized_tree"], "cached": True}

    # -------- 2. Normalize --------
    source_tree = copy.deepcopy(tree) if use_cache else None
    normalized = normalize_dimensions_for_satori(tree)

    # -------- 3. Store --------
    if use_cache:
        save_normalized_tree(tree_key, source_tree, normalized)

    return {"tree": normalized, "cached": False}


@app.get("/")
def root():
    return {"message": "Satori normalizer running"}


@app.post("/normalize")
def normalize_tree(req: NormalizeRequest):
    try:
        return _normalize_with_cache(req.tree, req.use_cache)
    except HTTPException:
        raise
    except Exception as e:
        traceback.print_exc()
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/normalize/url")
def normalize_remote_tree(req: NormalizeUrlRequest):
    try:
        tree = get_remote_tree(str(req.tree_url))
        if tree is not None and not isinstance(tree, (dict, list)):
            raise HTTPException(status_code=422, detail="Remote tree must be a node, a list of nodes or null")
        return _normalize_with_cache(tree, req.use_cache)
    except HTTPException:
        raise
    except Exception as e:
        traceback.print_exc()
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/coerce")
def coerce_value(req: CoerceRequest):
    return {"value": to_number_if_possible(req.value)}
