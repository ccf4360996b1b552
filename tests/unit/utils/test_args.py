from sitebox.utils.args import collapse_args


def test_collapse_args_flattens_nested_lists_in_order():
    args = collapse_args("run", ["-v", "a:b"], "img", ["--debug", "--verbose"])
    assert args == ["run", "-v", "a:b", "img", "--debug", "--verbose"]


def test_collapse_args_list_before_scalar():
    assert collapse_args(["-p", "1313:1313"], "img") == ["-p", "1313:1313", "img"]


def test_collapse_args_drops_empty_strings():
    args = collapse_args("", "run", "", ["", "-d", ""], "img", [])
    assert args == ["run", "-d", "img"]
    assert "" not in args


def test_collapse_args_skips_none():
    assert collapse_args("run", None, ["--rm"], None) == ["run", "--rm"]


def test_collapse_args_accepts_tuples():
    assert collapse_args(("mod", "edit"), "-json") == ["mod", "edit", "-json"]


def test_collapse_args_no_input():
    assert collapse_args() == []
