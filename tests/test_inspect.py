"""Tests for VirtualFile.inspect() and pipe()."""

import io

from vinylfile import PassThrough, VirtualFile


class Sink(io.BytesIO):
    """BytesIO that remembers its value when closed."""

    data = None

    def close(self):
        if not self.closed:
            self.data = self.getvalue()
        super().close()


class TestInspect:
    """Test the one-line summary of a file."""

    def test_no_contents_no_path(self):
        """Test that an empty file renders as a bare tag."""
        assert VirtualFile().inspect() == "<File >"

    def test_buffer_no_path(self):
        """Test that buffer bytes are dumped in hex."""
        file = VirtualFile(contents=b"test")
        assert file.inspect() == "<File <Buffer 74 65 73 74>>"

    def test_buffer_and_relative_path(self):
        """Test that the relative path is quoted before the buffer."""
        file = VirtualFile(cwd="/", base="/test/", path="/test/test.coffee", contents=b"test")
        assert file.inspect() == '<File "test.coffee" <Buffer 74 65 73 74>>'

    def test_stream_and_relative_path(self):
        """Test that stream contents are shown by their label."""
        file = VirtualFile(
            cwd="/", base="/test/", path="/test/test.coffee", contents=io.BytesIO(b"")
        )
        assert file.inspect() == '<File "test.coffee" <CloneableStream>>'

    def test_null_contents_and_relative_path(self):
        """Test that null contents show only the path."""
        file = VirtualFile(cwd="/", base="/test/", path="/test/test.coffee")
        assert file.inspect() == '<File "test.coffee">'

    def test_long_buffer_is_truncated(self):
        """Test that only the first 50 bytes are dumped."""
        file = VirtualFile(contents=b"a" * 60)
        expected = "<File <Buffer " + " ".join(["61"] * 50) + " ... 10 more bytes>>"
        assert file.inspect() == expected

    def test_empty_buffer(self):
        """Test that an empty buffer renders with no bytes."""
        assert VirtualFile(contents=b"").inspect() == "<File <Buffer >>"

    def test_repr(self):
        """Test that repr() matches inspect()."""
        file = VirtualFile(cwd="/", base="/test/", path="/test/test.coffee")
        assert repr(file) == file.inspect()


class TestPipe:
    """Test writing contents to a destination stream."""

    def test_buffer(self):
        """Test that buffer contents are written to the destination."""
        file = VirtualFile(contents=b"hello")
        dest = file.pipe(io.BytesIO(), end=False)
        assert dest.getvalue() == b"hello"

    def test_stream(self):
        """Test that stream contents are copied to the destination."""
        file = VirtualFile(contents=io.BytesIO(b"streamed"))
        dest = file.pipe(PassThrough(), end=False)
        assert dest.read() == b"streamed"

    def test_clone_still_readable_after_pipe(self):
        """Test that piping the original leaves a clone's copy intact."""
        file = VirtualFile(contents=io.BytesIO(b"shared"))
        twin = file.clone()
        file.pipe(io.BytesIO(), end=False)
        assert twin.contents.read() == b"shared"

    def test_null_writes_nothing(self):
        """Test that null contents write nothing."""
        dest = VirtualFile().pipe(io.BytesIO(), end=False)
        assert dest.getvalue() == b""

    def test_end_closes_destination(self):
        """Test that end=True closes the destination after writing."""
        dest = VirtualFile(contents=b"bye").pipe(Sink())
        assert dest.closed
        assert dest.data == b"bye"

    def test_end_closes_destination_for_null(self):
        """Test that end=True closes the destination for null contents too."""
        dest = VirtualFile().pipe(Sink())
        assert dest.closed
        assert dest.data == b""
