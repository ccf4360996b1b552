from sitebox.errors import (
    ContainerTimeoutError,
    ExternalToolError,
    FormatError,
    SiteboxError,
    SiteboxIOError,
    format_error_chain,
)


def test_error_taxonomy_matches_builtin_families():
    assert issubclass(FormatError, ValueError)
    assert issubclass(SiteboxIOError, OSError)
    assert issubclass(ContainerTimeoutError, TimeoutError)
    for cls in (FormatError, SiteboxIOError, ExternalToolError, ContainerTimeoutError):
        assert issubclass(cls, SiteboxError)


def test_external_tool_error_keeps_command_and_status():
    err = ExternalToolError("boom", command=("docker", "ps"), returncode=2)
    assert err.command == ["docker", "ps"]
    assert err.returncode == 2
    assert str(err) == "boom"


def test_format_error_chain_joins_causes():
    try:
        try:
            try:
                raise ExternalToolError("exit status 1")
            except ExternalToolError as e:
                raise SiteboxIOError("could not get logs for container web") from e
        except SiteboxIOError as e:
            raise ContainerTimeoutError("error waiting for the website") from e
    except ContainerTimeoutError as e:
        chain = format_error_chain(e)

    assert chain == (
        "error waiting for the website: "
        "could not get logs for container web: exit status 1"
    )


def test_format_error_chain_uses_class_name_for_empty_message():
    assert format_error_chain(SiteboxError()) == "SiteboxError"
