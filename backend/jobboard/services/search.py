"""
Public job ad search.

Builds the filtered, ranked and paginated listing for a (location, tag, page)
request and relaxes the filters towards remote roles when nothing matches.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import String, select, func, case, literal
from sqlalchemy.exc import SQLAlchemyError

from jobboard.errors import QueryFailure
from jobboard.models.job_ad import JobAd, PINNED_TIERS
from jobboard.services.ad_lifecycle import visible_clause

logger = logging.getLogger(__name__)

# Location used when the requested filters return nothing
FALLBACK_LOCATION = "Remote"


class QueryShape(str, Enum):
    """Which of the two filters a query carries"""
    NO_FILTER = "NO_FILTER"
    TAG_ONLY = "TAG_ONLY"
    LOCATION_ONLY = "LOCATION_ONLY"
    BOTH = "BOTH"

    @classmethod
    def for_filters(cls, location: str, tag_expr: str) -> "QueryShape":
        if location and tag_expr:
            return cls.BOTH
        if tag_expr:
            return cls.TAG_ONLY
        if location:
            return cls.LOCATION_ONLY
        return cls.NO_FILTER

    @property
    def has_tag(self) -> bool:
        return self in (QueryShape.TAG_ONLY, QueryShape.BOTH)

    @property
    def has_location(self) -> bool:
        return self in (QueryShape.LOCATION_ONLY, QueryShape.BOTH)


@dataclass
class SearchResult:
    ads: List[JobAd] = field(default_factory=list)
    total_count: int = 0
    fallback: bool = False


def normalize_tag(tag: str) -> str:
    """
    Turn free text into an OR expression: "go  |rust" -> "go|rust".
    """
    if not tag:
        return ""
    return "|".join(tag.replace("|", " ").split())


def _relevance(dialect_name: str, tag_expr: str) -> Tuple:
    """
    Build (match condition, score) for the tag expression.

    PostgreSQL ranks with full text search over title, company and
    description. Each token becomes its own plainto_tsquery and the queries
    are OR-ed, so user input is never parsed as tsquery syntax. Other
    backends score one point per token found in the same text,
    case-insensitively.
    """
    if dialect_name == "postgresql":
        document = (
            func.to_tsvector(JobAd.title)
            .op("||")(func.to_tsvector(JobAd.company))
            .op("||")(func.to_tsvector(JobAd.description))
        )
        tokens = tag_expr.split("|")
        query = func.plainto_tsquery(tokens[0])
        for token in tokens[1:]:
            query = query.op("||")(func.plainto_tsquery(token))
        return document.op("@@")(query), func.ts_rank(document, query)

    document = func.lower(
        JobAd.title + literal(" ") + JobAd.company + literal(" ") + JobAd.description,
        type_=String,
    )
    hits = [
        case((document.contains(token.lower(), autoescape=True), 1), else_=0)
        for token in tag_expr.split("|")
    ]
    score = hits[0]
    for hit in hits[1:]:
        score = score + hit
    return score > 0, score


def _build_query(
    shape: QueryShape,
    dialect_name: str,
    location: str,
    tag_expr: str,
    salary: int,
    currency: str,
    offset: int,
    limit: int,
):
    conditions = [
        visible_clause(),
        JobAd.ad_tier.not_in([tier.value for tier in PINNED_TIERS]),
    ]
    order_by = [JobAd.created_at.desc(), JobAd.id.desc()]

    if shape.has_location:
        conditions.append(JobAd.location.icontains(location, autoescape=True))

    if salary:
        conditions.append(JobAd.salary_max >= salary)
        if currency:
            conditions.append(JobAd.salary_currency == currency)

    if shape.has_tag:
        matches, score = _relevance(dialect_name, tag_expr)
        conditions.append(matches)
        order_by.insert(0, score.desc())

    return (
        select(JobAd, func.count().over().label("full_count"))
        .where(*conditions)
        .order_by(*order_by)
        .offset(offset)
        .limit(limit)
    )


async def _run_query(
    db: AsyncSession,
    location: str,
    tag_expr: str,
    salary: int,
    currency: str,
    page: int,
    page_size: int,
) -> Tuple[List[JobAd], int]:
    shape = QueryShape.for_filters(location, tag_expr)
    dialect_name = db.get_bind().dialect.name
    query = _build_query(
        shape,
        dialect_name,
        location,
        tag_expr,
        salary,
        currency,
        offset=(page - 1) * page_size,
        limit=page_size,
    )

    try:
        result = await db.execute(query)
        rows = result.all()
    except SQLAlchemyError as e:
        logger.exception(
            f"Job ad search failed (shape={shape.value}, location={location!r}, "
            f"tag={tag_expr!r}, salary={salary} {currency})"
        )
        raise QueryFailure("Unable to retrieve job ads") from e

    ads = [row[0] for row in rows]
    total_count = rows[0].full_count if rows else 0
    return ads, total_count


async def search(
    db: AsyncSession,
    location: str,
    tag: str,
    page: int,
    page_size: int,
    salary: int = 0,
    currency: str = "",
) -> SearchResult:
    """
    Search visible, non-pinned job ads.

    If the requested filters yield nothing, the search is retried for remote
    roles with the same tag, then for any remote role. The salary filter
    holds through every step. `fallback` tells the caller the listing no
    longer matches the original request.

    Args:
        db: Database session
        location: Case-insensitive substring of the ad location ("" for any)
        tag: Free-text keywords, any of which may match ("" for any)
        page: 1-indexed page number (callers clamp invalid input)
        page_size: Ads per page
        salary: Minimum yearly salary the ad must reach (0 for any)
        currency: Salary currency symbol the ad must use ("" for any); only
            applied together with a salary

    Raises:
        ValueError: If page or page_size is not positive, or salary is negative
        QueryFailure: If the store fails; the fallback is not attempted
    """
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")
    if salary < 0:
        raise ValueError(f"salary must be >= 0, got {salary}")

    location = (location or "").strip()
    tag_expr = normalize_tag(tag)
    currency = (currency or "").strip()

    ads, total_count = await _run_query(db, location, tag_expr, salary, currency, page, page_size)
    if ads:
        return SearchResult(ads=ads, total_count=total_count)

    logger.info(f"No job ads for location={location!r} tag={tag_expr!r}, falling back to {FALLBACK_LOCATION}")
    ads, total_count = await _run_query(db, FALLBACK_LOCATION, tag_expr, salary, currency, page, page_size)
    if not ads and tag_expr:
        ads, total_count = await _run_query(db, FALLBACK_LOCATION, "", salary, currency, page, page_size)

    return SearchResult(ads=ads, total_count=total_count, fallback=True)
