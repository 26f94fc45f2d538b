"""
services - Business-logic layer sitting between API and DB.
"""

from services.spell_service import SpellService                    # noqa: F401
from services.monster_service import MonsterService                # noqa: F401
from services.character_service import (                           # noqa: F401
    CharacterService,
    available_spell_levels,
)
from services.collection_service import (                          # noqa: F401
    PreparedSpellService,
    FavoriteMonsterService,
)
from services.errors import NotFound, InvalidInput                 # noqa: F401
