"""Configuration data models.

Models mirror the directives of a phpMyAdmin configuration file. Fields
carry the directive name as alias (``Servers``, ``LoginCookieValidity``)
and a snake_case attribute name. Unknown directives are preserved as
model extras so they survive a load/render round trip.

Both models are frozen and their mapping fields (``servers``, ``storage``)
are read-only views: a configuration is built once at startup and only
read afterwards.
"""

import re
from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import Annotated, Any, Literal

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator

_PORT_RE = re.compile(r"^\d{1,5}$")


class AuthType(str, Enum):
    """Authentication mode of a server entry."""

    COOKIE = "cookie"
    CONFIG = "config"
    SIGNON = "signon"
    HTTP = "http"


class ErrorReportPolicy(str, Enum):
    """Whether JavaScript error reports are sent upstream."""

    ASK = "ask"
    ALWAYS = "always"
    NEVER = "never"


class RecodingEngine(str, Enum):
    AUTO = "auto"
    ICONV = "iconv"
    RECODE = "recode"
    MB = "mb"
    NONE = "none"


class ConnectType(str, Enum):
    TCP = "tcp"
    SOCKET = "socket"


class StorageRole(str, Enum):
    """Logical tables of the configuration storage database.

    The value is the server directive naming the physical table.
    """

    BOOKMARK = "bookmarktable"
    RELATION = "relation"
    TABLE_INFO = "table_info"
    TABLE_COORDS = "table_coords"
    PDF_PAGES = "pdf_pages"
    COLUMN_INFO = "column_info"
    HISTORY = "history"
    TABLE_UIPREFS = "table_uiprefs"
    TRACKING = "tracking"
    USERCONFIG = "userconfig"
    RECENT = "recent"
    FAVORITE = "favorite"
    USERS = "users"
    USERGROUPS = "usergroups"
    NAVIGATIONHIDING = "navigationhiding"
    SAVEDSEARCHES = "savedsearches"
    CENTRAL_COLUMNS = "central_columns"
    DESIGNER_SETTINGS = "designer_settings"
    EXPORT_TEMPLATES = "export_templates"

    @property
    def default_table(self) -> str:
        """Table name used by the stock create_tables.sql script."""
        if self is StorageRole.BOOKMARK:
            return "pma__bookmark"
        return f"pma__{self.value}"


def _validate_port(value: Any) -> str:
    if isinstance(value, bool):
        raise ValueError("port must be a number")
    if isinstance(value, int):
        value = str(value)
    if not isinstance(value, str):
        raise ValueError("port must be a string")
    value = value.strip()
    if value == "":
        return value
    if not _PORT_RE.match(value) or not 0 < int(value) <= 65535:
        raise ValueError(f"port must be between 1 and 65535, got {value!r}")
    return value


def _validate_table(value: str) -> str:
    if not value.strip():
        raise ValueError("table name must not be empty")
    return value


TableName = Annotated[str, AfterValidator(_validate_table)]


class ServerEntry(BaseModel):
    """One database server connection profile (``$cfg['Servers'][$i]``)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    host: str = Field(description="Server hostname or IP address")
    port: str = Field(default="", description="Server port, empty for the default")
    auth_type: AuthType = Field(default=AuthType.COOKIE, description="Authentication mode")
    connect_type: ConnectType = Field(default=ConnectType.TCP, description="Connection transport")
    compress: bool = Field(default=False, description="Use protocol compression")
    allow_no_password: bool = Field(default=False, alias="AllowNoPassword")

    controlhost: str = Field(default="", description="Host for the control connection")
    controlport: str = Field(default="", description="Port for the control connection")
    controluser: str = Field(default="", description="User for the control connection")
    controlpass: str = Field(default="", description="Password for the control connection")

    pmadb: str = Field(default="", description="Configuration storage database")
    hide_db: str = Field(default="", description="Regex of databases hidden from navigation")
    storage: Annotated[Mapping[StorageRole, TableName], AfterValidator(MappingProxyType)] = Field(
        default_factory=dict,
        description="Storage role -> physical table name",
    )

    @model_validator(mode="before")
    @classmethod
    def gather_storage_tables(cls, data: Any) -> Any:
        """Move flat table directives (``relation``, ``history``...) into ``storage``."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        storage = dict(data.pop("storage", None) or {})
        for role in StorageRole:
            if role.value in data:
                storage[role.value] = data.pop(role.value)
        data["storage"] = storage
        return data

    @field_validator("port", "controlport", mode="before")
    @classmethod
    def validate_port(cls, v: Any) -> str:
        return _validate_port(v)

    @field_validator("host")
    @classmethod
    def validate_host(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("host must not be empty")
        return v

    @field_serializer("storage")
    def serialize_storage(self, value: Mapping[StorageRole, str]) -> dict[StorageRole, str]:
        return dict(value)

    def table_for(self, role: StorageRole | str) -> str | None:
        """Physical table configured for a storage role, or None if disabled."""
        return self.storage.get(StorageRole(role))

    def to_directives(self) -> dict[str, Any]:
        """Flatten back to file directives, storage tables inline after ``pmadb``."""
        data = self.model_dump(by_alias=True, exclude={"storage"})
        directives: dict[str, Any] = {}
        for key, value in data.items():
            directives[key] = value
            if key == "pmadb":
                directives.update({role.value: self.storage[role] for role in StorageRole if role in self.storage})
        return directives


class Configuration(BaseModel):
    """Complete phpMyAdmin configuration (``$cfg``)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    blowfish_secret: str = Field(default="", description="Secret used to encrypt cookie auth passwords")
    servers: Annotated[Mapping[int, ServerEntry], AfterValidator(MappingProxyType)] = Field(alias="Servers")

    pma_no_relation_disable_warning: bool = Field(default=False, alias="PmaNoRelation_DisableWarning")
    suhosin_disable_warning: bool = Field(default=False, alias="SuhosinDisableWarning")
    server_library_difference_disable_warning: bool = Field(
        default=False, alias="ServerLibraryDifference_DisableWarning"
    )
    version_check: bool = Field(default=True, alias="VersionCheck")

    upload_dir: str = Field(default="", alias="UploadDir")
    save_dir: str = Field(default="", alias="SaveDir")
    send_error_reports: ErrorReportPolicy = Field(default=ErrorReportPolicy.ASK, alias="SendErrorReports")

    show_php_info: bool = Field(default=False, alias="ShowPhpInfo")
    show_change_password: bool = Field(default=True, alias="ShowChgPassword")
    allow_arbitrary_server: bool = Field(default=False, alias="AllowArbitraryServer")
    login_cookie_validity: int = Field(default=1440, gt=0, alias="LoginCookieValidity")
    browse_mime: bool = Field(default=True, alias="BrowseMIME")
    pdf_default_page_size: str = Field(default="A4", alias="PDFDefaultPageSize")
    default_charset: str = Field(default="utf-8", alias="DefaultCharset")
    recoding_engine: RecodingEngine = Field(default=RecodingEngine.AUTO, alias="RecodingEngine")
    allow_anywhere_recoding: bool = Field(default=False, alias="AllowAnywhereRecoding")
    iconv_extra_params: str = Field(default="//TRANSLIT", alias="IconvExtraParams")
    gd2_available: Literal["auto", "yes", "no"] = Field(default="auto", alias="GD2Available")

    @field_validator("servers")
    @classmethod
    def validate_server_indices(cls, v: Mapping[int, ServerEntry]) -> Mapping[int, ServerEntry]:
        if not v:
            raise ValueError("at least one server is required")
        for index in v:
            if index <= 0:
                raise ValueError(f"server index must be positive, got {index}")
        return v

    @field_serializer("servers")
    def serialize_servers(self, value: Mapping[int, ServerEntry]) -> dict[int, ServerEntry]:
        return dict(value)

    @field_validator("login_cookie_validity", mode="before")
    @classmethod
    def parse_cookie_validity(cls, v: Any) -> Any:
        """Accept integers and integer strings only (no bools, no fractional seconds)."""
        if isinstance(v, bool):
            raise ValueError("must be an integer number of seconds")
        if isinstance(v, str):
            text = v.strip()
            if not re.fullmatch(r"[+-]?\d+", text):
                raise ValueError(f"must be an integer number of seconds, got {v!r}")
            return int(text)
        if isinstance(v, float):
            if not v.is_integer():
                raise ValueError(f"must be an integer number of seconds, got {v!r}")
            return int(v)
        return v

    @model_validator(mode="after")
    def require_secret_for_cookie_auth(self) -> "Configuration":
        if self.uses_cookie_auth and not self.blowfish_secret.strip():
            raise ValueError("blowfish_secret is required when a server uses cookie authentication")
        return self

    @property
    def uses_cookie_auth(self) -> bool:
        return any(server.auth_type is AuthType.COOKIE for server in self.servers.values())

    @property
    def server(self) -> ServerEntry:
        """The first server entry (lowest index)."""
        return self.servers[min(self.servers)]

    def to_directives(self) -> dict[str, Any]:
        """Directive name -> value, servers flattened to their file directives."""
        data = self.model_dump(by_alias=True, exclude={"servers"})
        directives: dict[str, Any] = {"blowfish_secret": data.pop("blowfish_secret")}
        directives["Servers"] = {index: self.servers[index].to_directives() for index in sorted(self.servers)}
        directives.update(data)
        return directives
