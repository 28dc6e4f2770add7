import os
import tempfile


def safe_mkdtemp(prefix="noderegression-", dir=None):
    """
    Creates a temporary directory using mkdtemp, but makes sure that the
    returned directory is the full path on windows (see:
    https://bugzilla.mozilla.org/show_bug.cgi?id=1385928)

    The directory is world readable and executable, since the tested build
    is run from it.
    """
    tempdir = tempfile.mkdtemp(prefix=prefix, dir=dir)
    os.chmod(tempdir, 0o755)
    if os.name == "nt":
        from ctypes import create_unicode_buffer, windll

        BUFFER_SIZE = 500
        buffer = create_unicode_buffer(BUFFER_SIZE)
        get_long_path_name = windll.kernel32.GetLongPathNameW
        get_long_path_name(str(tempdir), buffer, BUFFER_SIZE)
        return buffer.value
    else:
        return tempdir
