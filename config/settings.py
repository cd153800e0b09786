import os
from dotenv import load_dotenv

load_dotenv()

# Upstream knowledge graph (server-held, never sent to the browser)
GOOGLE_KNOWLEDGE_GRAPH_API_KEY = os.getenv("GOOGLE_KNOWLEDGE_GRAPH_API_KEY", "")
KG_SEARCH_URL = os.getenv("KG_SEARCH_URL", "https://kgsearch.googleapis.com/v1/entities:search")
KG_RESULT_LIMIT = int(os.getenv("KG_RESULT_LIMIT", "10"))
KG_TIMEOUT_SECONDS = float(os.getenv("KG_TIMEOUT_SECONDS", "10"))

# Client-held values used by the page to reach the proxy
PROXY_BASE_URL = os.getenv("PROXY_BASE_URL", "")
PROXY_TOKEN = os.getenv("PROXY_TOKEN", "")

# Scoring knobs that differ per deployment
SCORE_CALIBRATION_CEILING = float(os.getenv("SCORE_CALIBRATION_CEILING", "600"))
SPECIALIZED_TYPES = [
    t.strip()
    for t in os.getenv(
        "SPECIALIZED_TYPES",
        "RealEstateAgent,RealEstateListing,HomeAndConstructionBusiness,Residence",
    ).split(",")
    if t.strip()
]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "8000"))
