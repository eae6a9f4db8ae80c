import os
import requests
from dotenv import load_dotenv
from fastapi import HTTPException

load_dotenv()

REMOTE_TREE_TIMEOUT = float(os.getenv("REMOTE_TREE_TIMEOUT", "10"))

HEADERS = {
    "Accept": "application/json"
}


def get_remote_tree(tree_url: str):
    """
    Fetch a satori-html node tree serialized as JSON.

    Returns whatever JSON the remote serves (node, list of nodes or null).
    """
    try:
        response = requests.get(tree_url, headers=HEADERS, timeout=REMOTE_TREE_TIMEOUT)
        response.raise_for_status()
    except requests.RequestException as e:
        print("[REMOTE ERROR]", tree_url, e)
        raise HTTPException(status_code=502, detail=f"Could not fetch tree: {e}")

    try:
        tree = response.json()
    except ValueError:
        raise HTTPException(status_code=422, detail="Remote tree is not valid JSON")

    print("[REMOTE] Fetched tree from", tree_url)
    return tree
