import io

import pytest

from intcode import cli


@pytest.fixture()
def program_file(tmp_path):
    def write(text, name="program.txt"):
        path = tmp_path / name
        path.write_text(text)
        return str(path)

    return write


def test_run_with_inputs(program_file, compare_to_8):
    stdout = io.StringIO()
    path = program_file(",".join(map(str, compare_to_8)))
    assert cli.main([path, "-i", "8"], stdout=stdout) == 0
    assert stdout.getvalue() == "1000\n"


def test_run_from_stdin(program_file):
    stdout = io.StringIO()
    path = program_file("3,0,4,0,3,0,4,0,99")

    assert cli.main([path, "--stdin"], stdin=io.StringIO("5\n6\n"), stdout=stdout) == 0
    assert stdout.getvalue() == "5\n6\n"


def test_inputs_then_stdin(program_file):
    stdout = io.StringIO()
    path = program_file("3,0,4,0,3,0,4,0,99")

    assert cli.main([path, "-i", "5", "--stdin"], stdin=io.StringIO("6\n"), stdout=stdout) == 0
    assert stdout.getvalue() == "5\n6\n"


def test_dump_memory(program_file):
    stdout = io.StringIO()
    assert cli.main([program_file("1101,2,3,0,99"), "--dump"], stdout=stdout) == 0
    assert stdout.getvalue().splitlines()[1:] == [
            "[0x0000] 5",
            "[0x0001] 2",
            "[0x0002] 3",
            "[0x0003] 0",
            "[0x0004] 99",
            ]


def test_amplify(program_file):
    stdout = io.StringIO()
    path = program_file("3,15,3,16,1002,16,10,16,1,16,15,15,4,15,99,0,0")

    assert cli.main([path, "--amplify", "0,1,2,3,4"], stdout=stdout) == 0
    assert stdout.getvalue() == "43210\n"


def test_assemble(program_file):
    stdout = io.StringIO()
    path = program_file("OUT #7\nHLT\n", name="program.asm")

    assert cli.main([path, "--assemble"], stdout=stdout) == 0
    assert stdout.getvalue() == "7\n"


def test_fixed_size_faults(program_file):
    path = program_file("109,1,204,-1,1001,100,1,100,1008,100,16,101,1006,101,0,99")
    assert cli.main([path, "--size", "16"], stdout=io.StringIO()) == 1


def test_errors_exit_nonzero(program_file):
    assert cli.main([program_file("1,2,oops")], stdout=io.StringIO()) == 1
    assert cli.main([program_file("42")], stdout=io.StringIO()) == 1
    assert cli.main([program_file("3,0,99")], stdout=io.StringIO()) == 1


def test_missing_file(tmp_path):
    assert cli.main([str(tmp_path / "missing.txt")], stdout=io.StringIO()) == 1
