"""
Absolute next/previous page links for paginated listings.
"""

import math
from typing import Optional, Tuple

from fastapi import Request


LOCAL_HOSTS = ("localhost", "127.0.0.1")


def total_pages(total_count: int, page_size: int) -> int:
    """Number of pages needed for ``total_count`` items."""
    return math.ceil(total_count / page_size)


def has_next_page(page_number: int, page_size: int, total_count: int) -> bool:
    return page_number < total_pages(total_count, page_size)


def has_previous_page(page_number: int) -> bool:
    return page_number > 1


class PageLinkBuilder:
    """
    Builds page links pointing at a named route of the current deployment.

    Links use ``http`` for requests addressed to localhost or 127.0.0.1
    and ``https`` for every other host, whatever the inbound scheme was.
    Replace ``scheme_for`` to change that policy.
    """

    def __init__(self, request: Request, route_name: str):
        self.request = request
        self.route_name = route_name

    def scheme_for(self, host: Optional[str]) -> str:
        if host in LOCAL_HOSTS:
            return "http"
        return "https"

    def page_link(self, page_number: int, page_size: int) -> str:
        """Absolute URL of the route with only PageNumber and PageSize set."""
        url = self.request.url_for(self.route_name)
        url = url.replace(scheme=self.scheme_for(url.hostname))
        return str(url.include_query_params(PageNumber=page_number, PageSize=page_size))

    def build(self, page_number: int, page_size: int, total_count: int) -> Tuple[Optional[str], Optional[str]]:
        """
        Compute the next and previous page links.

        Args:
            page_number: Current page (1-based)
            page_size: Items per page
            total_count: Items matching the filter

        Returns:
            (next_page, previous_page); each is None when no such page exists
        """
        next_page = None
        previous_page = None

        if has_next_page(page_number, page_size, total_count):
            next_page = self.page_link(page_number + 1, page_size)

        if has_previous_page(page_number):
            previous_page = self.page_link(page_number - 1, page_size)

        return next_page, previous_page
