from local_yield.services.common.unit_of_work import TransactionError, UnitOfWork

__all__ = ["TransactionError", "UnitOfWork"]
