import pytest

from intcode import compiler


# compares its input against 8: 999 below, 1000 equal, 1001 above
COMPARE_TO_8 = (
        "3,21,1008,21,8,20,1005,20,22,107,8,21,20,1006,20,31,1106,0,36,98,0,0,"
        "1002,21,125,20,4,20,1105,1,46,104,999,1105,1,46,1101,1000,1,20,4,20,"
        "1105,1,46,98,99"
        )

QUINE = "109,1,204,-1,1001,100,1,100,1008,100,16,101,1006,101,0,99"


@pytest.fixture()
def compare_to_8():
    return compiler.parse(COMPARE_TO_8)


@pytest.fixture()
def quine():
    return compiler.parse(QUINE)
