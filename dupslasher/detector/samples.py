"""Built-in demonstration corpus used by ``dupslasher demo``.

Contains four related pairs (two paraphrased paragraphs, a song with a
recurring word swapped, an exact repeat, a lightly edited notice) and one
unrelated sentence.  With the default settings only the song (2, 3) and the
exact repeat (4, 5) fall below the 0.3 distance threshold; the paraphrased
paragraphs and the edited notice estimate just above it.
"""
from __future__ import annotations

from typing import List

_ROSES = (
    "Roses are {c}, my love, doo-roo-roo-roo\n"
    "A long-long time ago, on graduation day\n"
    "You handed me your book, I signed this way\n"
    "Roses are {c}, my love, violets are blue\n"
    "Sugar is sweet, my love, but not as sweet as you\n"
    "We dated through high school, and when the big day came\n"
    "I wrote into your book, next to my name\n"
    "Roses are {c}, my love, violets are blue\n"
    "Sugar is sweet, my love, but not as sweet as you\n"
    "(As sweet as you)\n"
    "Then I went far away and you found someone new\n"
    "I read your letter, dear, and I wrote back to you\n"
    "Roses are {c}, my love, violets are blue\n"
    "Sugar is sweet, my love, good luck, may God bless you\n"
    "(May God bless you)\n"
    "Is that your little girl? She looks a lot like you\n"
    "Someday, some boy will write in her book too\n"
    "Roses are {c}, my love, violets are blue\n"
    "Sugar is sweet, my love, but not as sweet as you\n"
    "Roses are {c}\n"
)

SAMPLE_DOCUMENTS: List[str] = [
    "Since 2000, the Vatreni have qualified for every major tournament except UEFA Euro 2000 "
    "and the 2010 FIFA World Cup. At the World Cup, Croatia has finished second once (2018) and "
    "third on two occasions (1998, 2022), securing three World Cup medals. Davor Šuker won the "
    "Golden Shoe and the Silver Ball in 1998, while Luka Modrić won the Golden Ball in 2018 and "
    "the Bronze Ball in 2022. The team has reached the quarter-finals of the UEFA European "
    "Championship twice (1996, 2008). They finished second in the UEFA Nations League in 2023.",
    "Since 2000, the Vatreni have not qualified for every minor tournament except for the 2010 "
    "FIFA World Cup. At the World Cup, Croatia has finished second once (2018) and third on two "
    "occasions (1998, 2022), securing three World Cup medals. Davor Šuker won the Golden Shoe "
    "and the Silver Ball in 1998, while Luka Modrić won the Golden Ball in 2018 and the Bronze "
    "Ball in 2022. The team has not reached the quarter-finals of the UEFA European Championship "
    "twice (1996, 2008). They finished third in the UEFA Nations League in 2023.",
    _ROSES.format(c="red"),
    _ROSES.format(c="blue"),
    "The quick brown fox jumps over the lazy dog",
    "The quick brown fox jumps over the lazy dog",
    "different than the others",
    "As described in RFC 2606 and RFC 6761, a number of domains such as example.com and "
    "example.org are maintained for documentation purposes. These domains may be used as "
    "illustrative examples in documents without prior coordination with us. They are not "
    "available for registration or transfer. We provide a web service on the example domain "
    "hosts to provide basic information on the purpose of the domain. These web services are "
    "provided as best effort, but are not designed to support production applications. While "
    "incidental traffic for incorrectly configured applications is expected, please do not "
    "design applications that require the example domains to have operating HTTP service.",
    "As described in RFC 11111 or RFC 6761, many domains such as example.com and example.org "
    "are maintained for various purposes. These domains may be used as illustrative examples in "
    "documents without previously coordinating with us. They are not available for registration "
    "or transfer. We provide a web service on the example domain hosts to provide basic "
    "information on the purpose of the domain. These web services are provided as best effort, "
    "but are not designed to support production applications. While incidental traffic for "
    "misconfigured applications is expected, please do not design applications that require the "
    "example domains to have operating HTTP service.",
]
