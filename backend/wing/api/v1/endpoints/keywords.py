"""
Keywords API Endpoints

Sub-keyword suggestions for starting a new keyword graph.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from wing.schemas.graph import SubkeywordSuggestion
from wing.services.keywords import KeywordSuggester, get_keyword_suggester
from wing.services.keywords.service import DEFAULT_COUNT

router = APIRouter()


class SubkeywordBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    main_keyword: str = Field(default="", alias="mainKeyword")
    count: int = DEFAULT_COUNT


@router.post("/subkeywords", response_model=SubkeywordSuggestion, status_code=201)
async def suggest_subkeywords(
    body: SubkeywordBody,
    suggester: KeywordSuggester = Depends(get_keyword_suggester),
):
    """
    Suggest up to `count` (1..20) related keywords for a main keyword.

    A model answer that cannot be parsed yields an empty list.
    """
    return await suggester.suggest(body.main_keyword, body.count)
