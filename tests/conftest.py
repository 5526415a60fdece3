"""
SUBCRACK - Pytest fixtures.
"""

import random

import pytest

from cryptanalysis.reference import load_reference
from cryptanalysis.substitution import Key

SAMPLE_TEXT = """\
The history of secret writing is as old as writing itself. Whenever people have
had something to hide from a rival, a ruler or a curious servant, they have found
ways to disguise their words. One of the simplest methods is to replace every letter
of the message with another letter, following a fixed rule known only to the sender
and the receiver. For many centuries this kind of cipher was thought to be quite
safe, because the number of possible keys is enormous and nobody could hope to try
them all by hand.

The weakness of the method was discovered by scholars who studied the language
itself rather than the cipher. They noticed that in any long piece of ordinary text
some letters appear far more often than others. In English the letter e is the most
common, followed by t, a, o, i and n, while letters such as j, q, x and z are rare.
A message that has been disguised by a simple substitution keeps these patterns,
because each letter is always replaced by the same symbol. By counting the symbols
in the secret message and comparing the counts with the known frequencies of the
language, the analyst can make a very good first guess at the key.

That first guess is rarely perfect. Letters with similar frequencies are easily
confused, and a short message may not follow the usual pattern at all. The analyst
therefore looks at pairs and triples of letters as well. The pair th and the triple
the are extremely common in English, and so are the endings ing, ion and ed. If a
proposed key turns the message into text that is full of these familiar groups, it
is probably close to the truth; if the result is a jumble of unlikely combinations,
some of the letters must still be wrong.

A patient person can improve the guess step by step. At each step two letters of
the key are exchanged, the message is decrypted again, and the new text is judged
against the expected statistics. When the exchange makes the text look more like
real language it is kept, and when it makes things worse it is usually thrown away.
After many such small changes the key settles into a state where no single exchange
helps any more, and in most cases that state is the correct answer or very near it.
A computer can perform thousands of these steps in the time it takes a person to
check one, which is why this old puzzle can now be solved almost instantly. The
same idea of making small random changes and keeping the good ones is used today
in many other fields, from planning delivery routes to arranging the parts of a
machine, and it remains one of the most useful tools of the working problem solver.
"""


@pytest.fixture(scope="session")
def reference():
    """Bundled English reference statistics."""
    return load_reference()


@pytest.fixture
def sample_text():
    return SAMPLE_TEXT


@pytest.fixture
def true_key():
    return Key("qwertyuiopasdfghjklzxcvbnm")


@pytest.fixture
def rng():
    return random.Random(1234)
