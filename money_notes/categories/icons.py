"""
Built-in category tables.

SYSTEM_CATEGORIES is the immutable set every ledger starts with, in
declared order. ICON_GLYPHS maps icon keys to the glyph the UI shows;
it is the default table and can be replaced per registry.
"""

from money_notes.models.bill import BillType
from money_notes.models.category import Category

SYSTEM_CATEGORIES: tuple[Category, ...] = (
    # Expense
    Category(id="sys_1", name="Dining", icon="food", type=BillType.EXPENSE, sort_order=1),
    Category(id="sys_2", name="Transport", icon="transport", type=BillType.EXPENSE, sort_order=2),
    Category(id="sys_3", name="Shopping", icon="shopping", type=BillType.EXPENSE, sort_order=3),
    Category(id="sys_4", name="Entertainment", icon="entertainment", type=BillType.EXPENSE, sort_order=4),
    Category(id="sys_5", name="Housing", icon="housing", type=BillType.EXPENSE, sort_order=5),
    Category(id="sys_6", name="Medical", icon="medical", type=BillType.EXPENSE, sort_order=6),
    Category(id="sys_7", name="Education", icon="education", type=BillType.EXPENSE, sort_order=7),
    Category(id="sys_8", name="Communication", icon="communication", type=BillType.EXPENSE, sort_order=8),
    Category(id="sys_9", name="Other", icon="other", type=BillType.EXPENSE, sort_order=99),
    # Income
    Category(id="sys_10", name="Salary", icon="salary", type=BillType.INCOME, sort_order=1),
    Category(id="sys_11", name="Bonus", icon="bonus", type=BillType.INCOME, sort_order=2),
    Category(id="sys_12", name="Investment", icon="investment", type=BillType.INCOME, sort_order=3),
    Category(id="sys_13", name="Part-time", icon="parttime", type=BillType.INCOME, sort_order=4),
    Category(id="sys_14", name="Red packet", icon="redpacket", type=BillType.INCOME, sort_order=5),
    Category(id="sys_15", name="Other", icon="other", type=BillType.INCOME, sort_order=99),
)

ICON_GLYPHS: dict[str, str] = {
    "food": "🍔",
    "transport": "🚗",
    "shopping": "🛒",
    "entertainment": "🎮",
    "housing": "🏠",
    "medical": "💊",
    "education": "📚",
    "communication": "📱",
    "salary": "💰",
    "bonus": "🎁",
    "investment": "📈",
    "parttime": "💼",
    "redpacket": "🧧",
    "other": "📋",
    # Extra keys offered for custom categories
    "travel": "✈️",
    "pet": "🐱",
    "beauty": "💄",
    "sports": "⚽",
    "gift": "🎀",
    "insurance": "🛡️",
    "tax": "📝",
    "child": "👶",
    "elder": "👴",
    "social": "🍻",
    "digital": "💻",
    "clothing": "👔",
    "book": "📖",
    "movie": "🎬",
    "music": "🎵",
    "game": "🎲",
    "fitness": "💪",
    "coffee": "☕",
    "fruit": "🍎",
    "snack": "🍪",
}
