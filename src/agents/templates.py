"""
Fallback Templates
Hand-written, always-valid markup used when synthesis fails.
"""

from enum import Enum
from types import MappingProxyType
from typing import List, Mapping

from pydantic import BaseModel, ConfigDict


class TemplateCategory(str, Enum):
    """Coarse request categories with a fallback template."""

    LOGIN = "login"
    MODAL = "modal"
    NAVBAR = "navbar"
    CARD = "card"
    TABLE = "table"
    GENERIC = "generic"


class FallbackTemplate(BaseModel):
    """Fallback template definition"""

    model_config = ConfigDict(frozen=True)

    category: TemplateCategory
    name: str
    keywords: tuple[str, ...]
    code: str


class TemplateLibrary:
    """Library of fallback templates"""

    DEFAULT = TemplateCategory.MODAL

    TEMPLATES: Mapping[TemplateCategory, FallbackTemplate] = MappingProxyType({
        TemplateCategory.LOGIN: FallbackTemplate(
            category=TemplateCategory.LOGIN,
            name="Login Form",
            keywords=("login", "log in", "sign in", "signin", "auth", "register", "sign up", "signup", "password"),
            code="""<Card className="w-full max-w-md mx-auto p-6">
  <h2 className="text-2xl font-bold mb-6">Login</h2>
  <div className="space-y-4">
    <Input type="email" placeholder="Email" className="w-full" />
    <Input type="password" placeholder="Password" className="w-full" />
    <Button onClick={() => console.log('login')} className="w-full">Login</Button>
  </div>
</Card>""",
        ),

        TemplateCategory.MODAL: FallbackTemplate(
            category=TemplateCategory.MODAL,
            name="Modal Dialog",
            keywords=("modal", "dialog", "popup", "pop-up", "confirm"),
            code="""<Dialog open={true} onOpenChange={() => {}}>
  <Card className="p-6 max-w-md mx-auto">
    <h2 className="text-2xl font-bold mb-2">Modal Title</h2>
    <p className="text-gray-600 mb-4">Modal Description</p>
    <div className="flex gap-2 justify-end">
      <Button onClick={() => console.log('confirm')}>Confirm</Button>
      <Button onClick={() => console.log('cancel')} variant="outline">Cancel</Button>
    </div>
  </Card>
</Dialog>""",
        ),

        TemplateCategory.NAVBAR: FallbackTemplate(
            category=TemplateCategory.NAVBAR,
            name="Navigation Bar",
            keywords=("navbar", "nav bar", "navigation", "menu bar", "header menu"),
            code="""<Navbar className="bg-blue-600 text-white p-4">
  <div className="flex items-center justify-between">
    <h1 className="text-xl font-bold">Logo</h1>
    <nav className="flex gap-4">
      <Button onClick={() => console.log('home')} variant="ghost">Home</Button>
      <Button onClick={() => console.log('about')} variant="ghost">About</Button>
      <Button onClick={() => console.log('contact')} variant="ghost">Contact</Button>
    </nav>
  </div>
</Navbar>""",
        ),

        TemplateCategory.CARD: FallbackTemplate(
            category=TemplateCategory.CARD,
            name="Product Card",
            keywords=("product", "card", "item", "profile"),
            code="""<Card className="max-w-sm p-4">
  <div className="aspect-square bg-gray-200 mb-4 rounded"></div>
  <h3 className="text-lg font-bold mb-2">Product Name</h3>
  <p className="text-gray-600 mb-2">Product description</p>
  <div className="flex items-center justify-between">
    <span className="text-xl font-bold">$99.99</span>
    <Button onClick={() => console.log('cart')}>Add to Cart</Button>
  </div>
</Card>""",
        ),

        TemplateCategory.TABLE: FallbackTemplate(
            category=TemplateCategory.TABLE,
            name="Data Table",
            keywords=("table", "grid of", "spreadsheet", "rows", "list of users"),
            code="""<Table className="w-full">
  <thead>
    <tr>
      <th className="text-left p-2">Name</th>
      <th className="text-left p-2">Email</th>
      <th className="text-left p-2">Status</th>
    </tr>
  </thead>
  <tbody>
    <tr>
      <td className="p-2">John Doe</td>
      <td className="p-2">john@example.com</td>
      <td className="p-2"><Badge>Active</Badge></td>
    </tr>
    <tr>
      <td className="p-2">Jane Smith</td>
      <td className="p-2">jane@example.com</td>
      <td className="p-2"><Badge variant="secondary">Inactive</Badge></td>
    </tr>
  </tbody>
</Table>""",
        ),

        TemplateCategory.GENERIC: FallbackTemplate(
            category=TemplateCategory.GENERIC,
            name="Generic Panel",
            keywords=("dashboard", "page", "layout", "panel", "section", "landing"),
            code="""<Card className="w-full max-w-2xl mx-auto p-6">
  <h2 className="text-2xl font-bold mb-2">Overview</h2>
  <p className="text-gray-600 mb-4">Content goes here.</p>
  <div className="flex gap-2">
    <Button onClick={() => console.log('primary')}>Get Started</Button>
    <Button onClick={() => console.log('secondary')} variant="outline">Learn More</Button>
  </div>
</Card>""",
        ),
    })

    # Detection order; first keyword hit wins
    ORDER = (
        TemplateCategory.LOGIN,
        TemplateCategory.MODAL,
        TemplateCategory.NAVBAR,
        TemplateCategory.CARD,
        TemplateCategory.TABLE,
        TemplateCategory.GENERIC,
    )

    @classmethod
    def get(cls, category: TemplateCategory) -> FallbackTemplate:
        """Get template by category"""
        return cls.TEMPLATES[category]

    @classmethod
    def list_all(cls) -> List[FallbackTemplate]:
        """List all templates"""
        return list(cls.TEMPLATES.values())

    @classmethod
    def detect(cls, prompt: str) -> TemplateCategory:
        """Pick a category by keyword; unmatched prompts get the modal."""
        prompt_lower = prompt.lower()
        for category in cls.ORDER:
            if any(keyword in prompt_lower for keyword in cls.TEMPLATES[category].keywords):
                return category
        return cls.DEFAULT

    @classmethod
    def for_prompt(cls, prompt: str) -> FallbackTemplate:
        """Template matching the request text"""
        return cls.get(cls.detect(prompt))
