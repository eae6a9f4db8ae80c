from pymongo import MongoClient
from pymongo.errors import PyMongoError
from bson.errors import BSONError
from datetime import datetime, timezone
from dotenv import load_dotenv
import hashlib
import json
import os

load_dotenv()

MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
MONGO_DB = os.getenv("MONGO_DB", "satori_normalizer")
CACHE_ENABLED = os.getenv("NORMALIZER_CACHE_ENABLED", "1") == "1"

# bson raises OverflowError for ints wider than 8 bytes
CACHE_ERRORS = (PyMongoError, BSONError, OverflowError)

client = MongoClient(MONGO_URI, serverSelectionTimeoutMS=2000)

db = client[MONGO_DB]

# ---------- NORMALIZED TREE CACHE ----------
collection = db["normalized_trees"]


def ensure_indexes():
    collection.create_index(
        [("tree_key", 1)],
        unique=True
    )


def tree_cache_key(tree) -> str:
    canonical = json.dumps(tree, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha1(canonical.encode("utf-8")).hexdigest()


def save_normalized_tree(tree_key: str, source_tree, normalized_tree):
    if not CACHE_ENABLED:
        return
    try:
        collection.update_one(
            {"tree_key": tree_key},
            {
                "$set": {
                    "tree_key": tree_key,
                    "source_tree": source_tree,
                    "normalized_tree": normalized_tree,
                    "updated_at": datetime.now(timezone.utc)
                }
            },
            upsert=True
        )
    except CACHE_ERRORS as e:
        print("[CACHE ERROR] save failed:", e)


def get_cached_tree(tree_key: str):
    """Return the cache document for tree_key, or None on miss or cache failure."""
    if not CACHE_ENABLED:
        return None
    try:
        return collection.find_one(
            {"tree_key": tree_key},
            {"_id": 0}
        )
    except CACHE_ERRORS as e:
        print("[CACHE ERROR] lookup failed:", e)
        return None
