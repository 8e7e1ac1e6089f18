from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class WireModel(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)


class LoginRequest(WireModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class LoginApiResponse(WireModel):
    accessToken: str = Field(min_length=1)


class TokenClaims(WireModel):
    id: str = Field(min_length=1)
    username: str = Field(min_length=1)
    isSuperadmin: bool = False
    iat: int | None = None
    exp: int | None = None


class Admin(WireModel):
    id: str
    name: str = ""
    username: str
    isSuperadmin: bool = False
    email: str | None = None
    isActive: bool | None = None
    createdAt: str | None = None
    lastLogin: str | None = None


class CreateAdminRequest(WireModel):
    name: str = Field(min_length=1)
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)
    isSuperadmin: bool = False


class UpdateAdminRequest(WireModel):
    name: str | None = None
    username: str | None = None
    email: str | None = None
    isSuperadmin: bool | None = None
    isActive: bool | None = None


class UpdateProfileRequest(WireModel):
    username: str | None = None
    email: str | None = None


class UpdatePasswordRequest(WireModel):
    currentPassword: str
    newPassword: str = Field(min_length=1)


class Category(WireModel):
    id: str
    name_uz: str = ""
    name_en: str = ""
    name_ru: str = ""
    name_kz: str = ""
    description_uz: str = ""
    description_en: str = ""
    description_ru: str = ""
    description_kz: str = ""
    image: str = ""
    createdAt: str | None = None


class Subcategory(WireModel):
    id: str
    name_uz: str = ""
    name_en: str = ""
    name_ru: str = ""
    name_kz: str = ""
    categoryId: str
    createdAt: str | None = None


class Unit(WireModel):
    id: str
    name: str


class Country(WireModel):
    id: str
    name: str


class ProductFile(WireModel):
    id: str
    url: str
    isVideo: bool = False
    productId: str | None = None


class Product(WireModel):
    id: str
    name_uz: str = ""
    name_en: str = ""
    name_ru: str = ""
    name_kz: str = ""
    description_uz: str = ""
    description_en: str = ""
    description_ru: str = ""
    description_kz: str = ""
    structure_uz: str = ""
    structure_en: str = ""
    structure_ru: str = ""
    structure_kz: str = ""
    price: float = 0
    quantity: int = 0
    unitId: str | None = None
    viewCount: int | None = None
    categoryId: str | None = None
    subcategoryId: str | None = None
    countryId: str | None = None
    isDeleted: bool | None = None
    files: list[ProductFile] = Field(default_factory=list)
    createdAt: str | None = None
    updatedAt: str | None = None
    category: Category | None = None
    subcategory: Subcategory | None = None
    country: Country | None = None
    unit: Unit | None = None


class ProductWriteRequest(WireModel):
    # Unknown keys are rejected so a misspelled field never gets dropped on the way out.
    model_config = ConfigDict(extra="forbid")

    name_uz: str | None = None
    name_en: str | None = None
    name_ru: str | None = None
    name_kz: str | None = None
    description_uz: str | None = None
    description_en: str | None = None
    description_ru: str | None = None
    description_kz: str | None = None
    structure_uz: str | None = None
    structure_en: str | None = None
    structure_ru: str | None = None
    structure_kz: str | None = None
    price: float | None = Field(default=None, ge=0)
    quantity: int | None = Field(default=None, ge=0)
    unitId: str | None = None
    categoryId: str | None = None
    subcategoryId: str | None = None
    countryId: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class FileOrderEntry(WireModel):
    fileId: str = Field(min_length=1)
    order: int = Field(ge=0)


class UpdateFileOrderRequest(WireModel):
    files: list[FileOrderEntry]


class MessageResponse(WireModel):
    message: str = ""


class CarouselItem(WireModel):
    id: str
    file: str


class Currency(WireModel):
    buy: float
    sell: float


class ActivityLog(WireModel):
    id: str
    adminUserName: str = ""
    actionType: Literal["created", "updated", "deleted"]
    entityType: str
    entityName: str = ""
    createdAt: str
    details: str | dict[str, Any] | None = None


class LogAdmin(WireModel):
    id: str
    name: str = ""
    username: str = ""


class Log(WireModel):
    id: str
    adminId: str
    admin: LogAdmin | None = None
    actionType: Literal["created", "updated", "deleted"]
    entityType: str
    oldData: str | None = None
    newData: str | None = None
    createdAt: str


class DashboardStats(WireModel):
    totalProducts: int = 0
    totalCategories: int = 0
    totalViews: int = 0
    lowStockProducts: int = 0


class DashboardSummary(WireModel):
    stats: DashboardStats
    activities: list[ActivityLog] = Field(default_factory=list)


class GeneralSettings(WireModel):
    siteName: str = ""
    contactEmail: str = ""
    timezone: str = "UTC"
    emailNotifications: bool = False
    pushNotifications: bool = False
    smsNotifications: bool = False
