"""
Named-target matching for the Pokemon fan badges.

A card name matches a target name when it equals it or starts with the
target followed by a space ("Pikachu V", "Charizard ex"), compared
case-insensitively. "Raichu" does not match "Pikachu", nor "Mewtwo" "Mew".
"""
from dataclasses import dataclass


EEVEELUTIONS: tuple[str, ...] = (
    "Eevee",
    "Vaporeon",
    "Jolteon",
    "Flareon",
    "Espeon",
    "Umbreon",
    "Leafeon",
    "Glaceon",
    "Sylveon",
)

LEGENDARY_POKEMON: tuple[str, ...] = (
    # Gen 1
    "Articuno", "Zapdos", "Moltres", "Mewtwo", "Mew",
    # Gen 2
    "Raikou", "Entei", "Suicune", "Lugia", "Ho-Oh", "Celebi",
    # Gen 3
    "Regirock", "Regice", "Registeel", "Latias", "Latios",
    "Kyogre", "Groudon", "Rayquaza", "Jirachi", "Deoxys",
    # Gen 4
    "Uxie", "Mesprit", "Azelf", "Dialga", "Palkia", "Heatran",
    "Regigigas", "Giratina", "Cresselia", "Phione", "Manaphy",
    "Darkrai", "Shaymin", "Arceus",
    # Gen 5
    "Victini", "Cobalion", "Terrakion", "Virizion", "Tornadus",
    "Thundurus", "Reshiram", "Zekrom", "Landorus", "Kyurem",
    "Keldeo", "Meloetta", "Genesect",
    # Gen 6
    "Xerneas", "Yveltal", "Zygarde", "Diancie", "Hoopa", "Volcanion",
    # Gen 7
    "Tapu Koko", "Tapu Lele", "Tapu Bulu", "Tapu Fini", "Cosmog",
    "Cosmoem", "Solgaleo", "Lunala", "Necrozma", "Magearna",
    "Marshadow", "Zeraora", "Meltan", "Melmetal",
    # Gen 8
    "Zacian", "Zamazenta", "Eternatus", "Kubfu", "Urshifu",
    "Zarude", "Regieleki", "Regidrago", "Glastrier", "Spectrier",
    "Calyrex", "Enamorus",
    # Gen 9
    "Koraidon", "Miraidon", "Wo-Chien", "Chien-Pao", "Ting-Lu",
    "Chi-Yu", "Okidogi", "Munkidori", "Fezandipiti", "Ogerpon",
    "Terapagos", "Pecharunt",
)


@dataclass(frozen=True)
class NamedTarget:
    """A fan badge and the card names that count toward it."""
    badge_key: str
    name: str
    members: tuple[str, ...]

    def matches(self, card_name: str) -> bool:
        return any(matches_name(card_name, member) for member in self.members)


NAMED_TARGETS: tuple[NamedTarget, ...] = (
    NamedTarget("pikachu_fan", "Pikachu", ("Pikachu",)),
    NamedTarget("eevee_fan", "Eevee", EEVEELUTIONS),
    NamedTarget("charizard_fan", "Charizard", ("Charizard",)),
    NamedTarget("mewtwo_fan", "Mewtwo", ("Mewtwo",)),
    NamedTarget("legendary_fan", "Legendary", LEGENDARY_POKEMON),
)

_BY_BADGE_KEY = {t.badge_key: t for t in NAMED_TARGETS}


def matches_name(card_name: str, target: str) -> bool:
    """Exact or "<target> <qualifier>" match, case-insensitive."""
    name = card_name.strip().lower()
    wanted = target.strip().lower()
    return name == wanted or name.startswith(wanted + " ")


def find_target(scope: str) -> NamedTarget | None:
    """Resolve a target by badge key or target name."""
    target = _BY_BADGE_KEY.get(scope)
    if target is not None:
        return target
    lowered = scope.lower()
    for target in NAMED_TARGETS:
        if target.name.lower() == lowered:
            return target
    return None
