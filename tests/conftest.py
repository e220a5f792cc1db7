"""Shared fixtures for the draft engine test suite."""

import textwrap

import pytest


class SequenceRng:
    """Replays fixed fractions in order, cycling when they run out."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = 0

    def random(self):
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value


@pytest.fixture
def sequence_rng():
    """Factory: ``sequence_rng([0.0, 0.5])`` builds a stub random source."""
    return SequenceRng


@pytest.fixture
def zero_rng():
    """Always rolls 0.0, so every weighted draw takes the first entry."""
    return SequenceRng([0.0])


@pytest.fixture
def storage_dir(tmp_path):
    path = tmp_path / "drafts"
    path.mkdir()
    return path


# ── Booster data on disk ─────────────────────────────────────────────

def _write(directory, name, text):
    (directory / name).write_text(textwrap.dedent(text).lstrip(), encoding="utf-8")


def _card_rows():
    """Set ``tst`` has collation data; set ``old`` has cards only."""
    rows = [
        "tst,001,id-tst-1,Shock,common,R,1,Instant,true",
        "tst,002,id-tst-2,Grizzly Bears,common,G,2,Creature - Bear,true",
        "tst,003,id-tst-3,Divination,common,U,3,Sorcery,true",
        "tst,004,id-tst-4,Pacifism,common,W,2,Enchantment - Aura,true",
        "tst,005,id-tst-5,Duress,common,B,1,Sorcery,true",
        "tst,006,id-tst-6,Serra Angel,rare,W,5,Creature - Angel,true",
        "tst,007,id-tst-7,Shivan Dragon,mythic,R,6,Creature - Dragon,true",
        "tst,008,id-tst-8,Forest,common,,0,Basic Land - Forest,true",
        "tst,900,id-tst-900,Promo Angel,special,W,5,Creature - Angel,false",
    ]
    for i in range(12):
        rows.append(f"old,{i + 1},id-old-c{i},Old Common {i},common,G,2,Creature - Elf,true")
    for i in range(4):
        rows.append(f"old,{i + 20},id-old-u{i},Old Uncommon {i},uncommon,U,3,Sorcery,true")
    rows.append("old,30,id-old-r0,Old Rare,rare,B,4,Creature - Horror,true")
    rows.append("old,31,id-old-m0,Old Mythic,mythic,R,5,Creature - Dragon,true")
    rows.append("old,40,id-old-l0,Island,common,,0,Basic Land - Island,true")
    header = "set_code,collector_number,scryfall_id,name,rarity,colors,cmc,type_line,booster"
    return "\n".join([header] + rows) + "\n"


@pytest.fixture
def booster_dir(tmp_path):
    """A complete set of booster CSVs for two small sets."""
    path = tmp_path / "boosters"
    path.mkdir()
    _write(path, "booster_products.csv", """
        id,code,set_code
        1,TST-PLAY,TST
        2,tst-draft,tst
    """)
    _write(path, "booster_configs.csv", """
        id,product_id,weight
        10,1,1
        20,2,1
    """)
    _write(path, "booster_config_slots.csv", """
        config_id,sheet_id,count
        10,100,3
        10,101,1
        20,100,1
    """)
    _write(path, "booster_sheets.csv", """
        id,product_id,name,total_weight
        100,1,common,5
        101,1,rare,3
    """)
    _write(path, "sheet_cards.csv", """
        sheet_id,set_code,collector_number,weight,is_foil
        100,tst,001,1,false
        100,tst,002,1,false
        100,tst,003,1,false
        100,tst,004,1,false
        100,tst,005,1,false
        101,tst,006,2,false
        101,tst,007,1,true
    """)
    _write(path, "sets.csv", """
        code,name,released_at
        tst,Test Set,2024-02-09
        old,Old Set,2019-10-04
    """)
    (path / "cards.csv").write_text(_card_rows(), encoding="utf-8")
    return path
