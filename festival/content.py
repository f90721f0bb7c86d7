"""Static page content: community groups and contact details."""

from dataclasses import dataclass


@dataclass(frozen=True)
class WhatsAppGroup:
    city: str
    description: str
    link: str


WHATSAPP_GROUPS: tuple[WhatsAppGroup, ...] = (
    WhatsAppGroup(
        city="Marabá",
        description="Grupo oficial para participantes de Marabá e região",
        link="https://chat.whatsapp.com/HLvLuXLvJbP0VAqyxW9Mt6",
    ),
    WhatsAppGroup(
        city="Santarém",
        description="Grupo oficial para participantes de Santarém e região",
        link="https://chat.whatsapp.com/EFtRdI41eqYDtExdVkOTxd",
    ),
    WhatsAppGroup(
        city="Benevides",
        description="Grupo oficial para participantes de Benevides e região",
        link="https://chat.whatsapp.com/HfXIju09BVdKNpkeReLTLc",
    ),
    WhatsAppGroup(
        city="Portel",
        description="Grupo oficial para participantes de Portel e região",
        link="https://chat.whatsapp.com/HfXIju09BVdKNpkeReLTLc",
    ),
)

GROUP_GUIDELINES: tuple[str, ...] = (
    "Mantenha-se ativo no grupo da sua cidade para não perder nenhuma informação",
    "As datas das seletivas regionais serão divulgadas em breve",
    "Dúvidas gerais podem ser enviadas para qualquer um dos grupos",
    "Respeite as regras do grupo e mantenha o foco no festival",
)

# (label, value) pairs, in display order
CONTACTS: tuple[tuple[str, str], ...] = (
    ("Contato", "(91) 99371-4669"),
    ("E-mail", "amaismusicoficial@gmail.com"),
    ("Horário", "Seg-Sex: 7:00 - 18:00"),
    ("Produtor do evento", "@arlonoliveira"),
    ("Amaismusic Entretenimento", "@amaismusic"),
)
