from pydantic import BaseModel
from typing import Optional, List, Dict, Any


class ChatRequest(BaseModel):
    """Conversation forwarded verbatim to the completion API"""
    messages: Optional[List[Dict[str, Any]]] = None  # [{"role": "user", "content": "hi"}, ...]
