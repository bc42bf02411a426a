"""Utility layer errors."""


class UtilError(Exception):
    """Base utility error."""

    pass


class ConfigurationError(UtilError):
    """Settings cannot support the requested component.

    Attributes:
        setting: Environment name of the offending setting, if one applies
    """

    def __init__(self, message: str, setting: str | None = None):
        self.setting = setting
        super().__init__(f"{message} (check {setting})" if setting else message)


class DependencyInjectionError(UtilError):
    """No provider implementation matches a mockable component."""

    def __init__(self, component: str, use_mock: bool):
        self.component = component
        self.use_mock = use_mock
        kind = "mock" if use_mock else "production"
        super().__init__(f"No {kind} implementation for {component}")
