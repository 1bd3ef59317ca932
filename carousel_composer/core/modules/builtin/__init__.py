"""
Built-in Modules
================

The closed set of modules shipped with the composer, in default stacking order.
"""

from carousel_composer.core.modules.builtin.viewport import ViewportModule
from carousel_composer.core.modules.builtin.card import CardModule
from carousel_composer.core.modules.builtin.content_image import ContentImageModule
from carousel_composer.core.modules.builtin.image_text_box import ImageTextBoxModule
from carousel_composer.core.modules.builtin.text_fields import TextFieldsModule
from carousel_composer.core.modules.builtin.bullets import BulletsModule
from carousel_composer.core.modules.builtin.svg_elements import SvgElementsModule
from carousel_composer.core.modules.builtin.free_text import FreeTextModule
from carousel_composer.core.modules.builtin.arrow_bottom_text import ArrowBottomTextModule
from carousel_composer.core.modules.builtin.logo import LogoModule
from carousel_composer.core.modules.builtin.corners import CornersModule
from carousel_composer.core.modules.builtin.duo import DuoModule

BUILTIN_MODULES = (
    ViewportModule,
    CardModule,
    ContentImageModule,
    ImageTextBoxModule,
    TextFieldsModule,
    BulletsModule,
    SvgElementsModule,
    FreeTextModule,
    ArrowBottomTextModule,
    LogoModule,
    CornersModule,
    DuoModule,
)

__all__ = [
    "BUILTIN_MODULES",
    "ViewportModule",
    "CardModule",
    "ContentImageModule",
    "ImageTextBoxModule",
    "TextFieldsModule",
    "BulletsModule",
    "SvgElementsModule",
    "FreeTextModule",
    "ArrowBottomTextModule",
    "LogoModule",
    "CornersModule",
    "DuoModule",
]
