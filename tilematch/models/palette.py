"""Card kind palette (kind index -> display asset reference)."""

from pydantic import BaseModel, Field

DEFAULT_PALETTE_SIZE = 24


def default_card_sprites(scale: str = "") -> list[str]:
    """Build the default card sprite list.

    Args:
        scale: Suffix for high density variants (e.g., "@2x").

    Returns:
        Sprite paths for every default card kind.
    """
    return [
        f"/assets/cards/card-{i + 1:02d}{scale}.webp"
        for i in range(DEFAULT_PALETTE_SIZE)
    ]


class CardPalette(BaseModel, frozen=True):
    """Sprite references for each card kind.

    The engine works on integer kinds only; the palette just annotates
    cards for rendering and bounds how many kinds a level can use.
    """

    sprites: list[str] = Field(default_factory=default_card_sprites)
    sprites2x: list[str] = Field(default_factory=lambda: default_card_sprites("@2x"))

    @property
    def size(self) -> int:
        """Number of kinds that have artwork."""
        return len(self.sprites)

    def pool_size(self, card_kinds: int) -> int:
        """Number of kinds a level may draw from.

        An empty palette does not bound the pool.
        """
        kinds = max(1, card_kinds)
        if self.size == 0:
            return kinds
        return max(1, min(kinds, self.size))

    def sprite_for(self, kind: int) -> tuple[str | None, str | None]:
        """Get (sprite, sprite2x) for a kind, falling back by modulo."""
        if not self.sprites:
            return None, None
        sprite = self.sprites[kind % len(self.sprites)]
        if self.sprites2x:
            sprite2x = self.sprites2x[kind % len(self.sprites2x)]
        else:
            sprite2x = sprite
        return sprite, sprite2x
