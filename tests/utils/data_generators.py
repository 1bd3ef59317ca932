"""
Test Data Generators
====================

Generate module definitions and composition data for testing scenarios.
"""

from typing import Any, Dict, Iterable, List, Optional

from carousel_composer.core.layout.stylesheet import Stylesheet
from carousel_composer.core.modules.base import BaseModule
from carousel_composer.models.schemas import ModuleCategory, RenderContext, SpatialRule


class FakeModuleFactory:
    """Build minimal module classes for registry and compositer tests."""

    @staticmethod
    def create(
        module_id: str,
        dependencies: Iterable[str] = (),
        conflicts: Iterable[str] = (),
        allow_multiple_instances: bool = False,
        category: ModuleCategory = ModuleCategory.CONTENT,
        z_index: int = 10,
        markup: Optional[str] = None,
    ) -> BaseModule:
        """Create a module instance emitting one layer rule and a div."""
        attributes = {
            "id": module_id,
            "name": f"Fake {module_id}",
            "category": category,
            "z_index": z_index,
            "dependencies": frozenset(dependencies),
            "conflicts": frozenset(conflicts),
            "allow_multiple_instances": allow_multiple_instances,
            "schema": {"label": {"type": "string"}},
            "defaults": {"label": module_id},
        }

        def render_css(self, data: Dict[str, Any], ctx: RenderContext) -> Stylesheet:
            return Stylesheet().add(
                f".fake-{self.id.lower()}", {"position": "relative", "z-index": self.z_index}
            )

        def render_html(self, data: Dict[str, Any], ctx: RenderContext) -> str:
            if markup is not None:
                return markup
            return f'<div class="fake-{self.id.lower()}">{data["label"]}</div>'

        attributes["render_css"] = render_css
        attributes["render_html"] = render_html
        module_class = type(BaseModule)(f"Fake{module_id}Module", (BaseModule,), attributes)
        return module_class()


class SlideDataGenerator:
    """Generate slide data for composition tests."""

    @staticmethod
    def card_with_text(text: str = "Hello world") -> Dict[str, Any]:
        """Viewport, card and one text field."""
        return {
            "enabled_ids": ["viewport", "card", "textFields"],
            "data_by_id": {
                "viewport": {"backgroundColor": "#101010"},
                "card": {"backgroundColor": "#ffffff"},
                "textFields": {
                    "count": 1,
                    "fields": [
                        {
                            "content": text,
                            "style": {"fontSize": "32px", "color": "#000000"},
                            "styledChunks": [{"text": "world", "color": "#ff0000"}],
                        }
                    ],
                },
            },
        }

    @staticmethod
    def spatial_rule(rule_type: str, target: str, reference: Optional[str] = None,
                     reference2: Optional[str] = None, rule_id: Optional[str] = None) -> SpatialRule:
        """Create a spatial rule with a readable id."""
        return SpatialRule(
            id=rule_id or f"{rule_type}-{target}",
            type=rule_type,
            target=target,
            reference=reference,
            reference2=reference2,
        )

    @staticmethod
    def carousel_slides() -> List[Dict[str, Any]]:
        """Three slides using the Portuguese field names."""
        return [
            {
                "numero": 1,
                "estilo": "stack-img",
                "texto_1": "Cinco hábitos que mudam tudo",
                "texto_2": "Comece pelo primeiro",
                "texto_principal": "texto_1",
            },
            {
                "numero": 2,
                "estilo": "stack-img-bg reverse",
                "texto_1": "Durma oito horas",
                "texto_2": "O corpo agradece",
                "texto_principal": "texto_1",
            },
            {
                "numero": 3,
                "estilo": "stack-img-bg-b",
                "texto_1": "Beba mais água",
            },
        ]

    @classmethod
    def carousel_payload(cls) -> Dict[str, Any]:
        """Carousel document with photos and external highlights."""
        return {
            "carousel": {"copy": {"slides": cls.carousel_slides()}},
            "photos": [
                {
                    "slide": 1,
                    "photo": {
                        "src": {
                            "portrait": "https://images.example.com/1-portrait.jpg",
                            "landscape": "https://images.example.com/1-landscape.jpg",
                        }
                    },
                },
                {
                    "slide": 2,
                    "photo": {"src": {"original": "https://images.example.com/2.jpg"}},
                },
            ],
            "destaques": [
                {"numero": 1, "destaques": {"texto_1": ["hábitos"]}},
                {
                    "numero": 3,
                    "destaques": {
                        "texto_1": [{"trecho": "água", "tipo": "bold", "cor": True}]
                    },
                },
            ],
        }
