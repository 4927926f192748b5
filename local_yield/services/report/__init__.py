from local_yield.services.report.report_service import MAX_PAGE_SIZE, ReportService

__all__ = ["MAX_PAGE_SIZE", "ReportService"]
