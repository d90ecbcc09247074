"""Retrieval pipeline services."""

from pricehist.core.services.calendars import TradingMonthCalendar, default_calendar
from pricehist.core.services.filter import UnnecessaryRequestFilter
from pricehist.core.services.merger import RequestMerger
from pricehist.core.services.recorder import RetrievedMonthRecorder
from pricehist.core.services.retrieval import HistoryRetrievalService
from pricehist.core.services.slicer import RequestSlicer

__all__ = [
    "HistoryRetrievalService",
    "RequestMerger",
    "RequestSlicer",
    "RetrievedMonthRecorder",
    "TradingMonthCalendar",
    "UnnecessaryRequestFilter",
    "default_calendar",
]
