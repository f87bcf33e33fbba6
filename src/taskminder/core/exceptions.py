"""Taskminder 异常体系

两层异常：
- DomainError: 值对象构造失败（状态解析、日期解析），只在 core 内部抛出；
- ApplicationError: 编排层对外暴露的失败类型（Validation / NotFound），
  携带 code + message + 可选字段错误列表，传输层据此渲染响应。
"""

from pydantic import BaseModel


class DomainError(Exception):
    """值对象 / 实体构造失败的基础异常"""


class InvalidStatusError(DomainError):
    """无法识别的任务状态文本"""

    def __init__(self, value: str) -> None:
        super().__init__(f"Invalid task status: {value}")
        self.value = value


class InvalidDateError(DomainError):
    """无法表示为有效时间点的日期输入"""

    def __init__(self, value: object) -> None:
        super().__init__(f"Invalid date: {value!r}")
        self.value = value


class FieldError(BaseModel):
    """字段级错误信息"""

    path: str
    message: str


class ApplicationError(Exception):
    """编排层异常基类"""

    code: str = "APPLICATION_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ApplicationError):
    """输入形状非法、分页越界、状态/日期无法解析

    调用方修正输入后即可恢复，内部从不重试。
    """

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, errors: list[FieldError] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []

    @classmethod
    def for_field(cls, path: str, message: str) -> "ValidationError":
        """构造单字段校验错误"""
        return cls(message, [FieldError(path=path, message=message)])


class NotFoundError(ApplicationError):
    """操作引用了不存在的资源"""

    code = "TASK_NOT_FOUND"

    def __init__(self, resource: str, resource_id: str) -> None:
        super().__init__(f"{resource} with id {resource_id} does not exist")
        self.resource = resource
        self.resource_id = resource_id
