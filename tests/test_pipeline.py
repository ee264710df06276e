"""
Tests für die Verarbeitungs-Pipeline (Eingangsprüfung, Ablauf, Ausgabe).
"""

import io
import tempfile
from pathlib import Path
import pytest
import numpy as np
import soundfile as sf

from audio_eq.core.audio_io import SampleBuffer
from audio_eq.core.errors import (
    DecodeError,
    EmptyBufferError,
    OversizeError,
    UnsupportedFormatError,
)
from audio_eq.core.pipeline import (
    MAX_FILE_SIZE,
    SUPPORTED_AUDIO_TYPES,
    ProcessingConfig,
    default_output_path,
    derive_output_name,
    process_bytes,
    process_file,
    validate_input,
    write_atomic,
)
from audio_eq.core.wav_encoder import encode_wav


def wav_bytes(data, sample_rate=44100):
    buf = io.BytesIO()
    sf.write(buf, data, sample_rate, format="WAV", subtype="PCM_16")
    return buf.getvalue()


def stereo_noise(frames=4410, seed=0):
    rng = np.random.default_rng(seed)
    return rng.uniform(-0.3, 0.3, (frames, 2))


class TestValidateInput:
    """Tests für die Eingangsprüfung."""

    @pytest.mark.parametrize("mime_type", SUPPORTED_AUDIO_TYPES)
    def test_accepted_types(self, mime_type):
        validate_input(mime_type, 1000)

    @pytest.mark.parametrize("mime_type", ["video/mp4", "text/plain", "audio/x-aiff", None])
    def test_unsupported_type(self, mime_type):
        with pytest.raises(UnsupportedFormatError, match="Unsupported file type"):
            validate_input(mime_type, 1000)

    def test_size_limit(self):
        """Genau 1 GiB ist erlaubt, ein Byte mehr nicht."""
        assert MAX_FILE_SIZE == 1024 ** 3
        validate_input("audio/wav", MAX_FILE_SIZE)
        with pytest.raises(OversizeError):
            validate_input("audio/wav", MAX_FILE_SIZE + 1)

    def test_custom_config(self):
        config = ProcessingConfig(accepted_types=("audio/wav",), max_file_size=10)
        with pytest.raises(UnsupportedFormatError):
            validate_input("audio/mpeg", 5, config)
        with pytest.raises(OversizeError):
            validate_input("audio/wav", 11, config)


class TestOutputName:
    """Tests für den Ausgabedateinamen."""

    @pytest.mark.parametrize("name,expected", [
        ("song.mp3", "song-EQ.mp3"),
        ("my.song.wav", "my.song-EQ.wav"),
        ("README", "README-EQ"),
        (".hidden", "-EQ.hidden"),
    ])
    def test_derive_output_name(self, name, expected):
        assert derive_output_name(name) == expected

    def test_default_output_path(self):
        assert default_output_path(Path("/tmp/a/take1.flac")) == Path("/tmp/a/take1-EQ.flac")


class TestProcessBytes:
    """Tests für den Ablauf im Speicher."""

    def test_output_format(self):
        """Ausgabe ist 16-Bit-PCM mit gleicher Kanalzahl und Samplerate."""
        wav = process_bytes(wav_bytes(stereo_noise(), 48000), "audio/wav")

        info = sf.info(io.BytesIO(wav))
        assert info.samplerate == 48000
        assert info.channels == 2
        assert info.frames == 4410
        assert info.subtype == "PCM_16"
        assert len(wav) == 44 + 4410 * 2 * 2

    def test_silence_stays_silent(self):
        wav = process_bytes(wav_bytes(np.zeros(1000)), "audio/wav")
        assert wav[44:] == bytes(2000)

    def test_curve_injection(self):
        """Leere Kurve → Ausgabe entspricht dem quantisierten Eingang."""
        source = SampleBuffer(stereo_noise(), 44100)
        raw = encode_wav(source)

        wav = process_bytes(raw, "audio/wav", ProcessingConfig(curve=()))

        loaded, _ = sf.read(io.BytesIO(wav), dtype="float32")
        expected, _ = sf.read(io.BytesIO(raw), dtype="float32")
        np.testing.assert_allclose(loaded, expected, atol=2 / 32767)

    def test_eq_changes_signal(self):
        source = wav_bytes(stereo_noise())
        assert process_bytes(source, "audio/wav")[44:] != source[44:]

    def test_unsupported_type_before_decoding(self):
        with pytest.raises(UnsupportedFormatError):
            process_bytes(b"garbage", "application/octet-stream")

    def test_invalid_audio(self):
        with pytest.raises(DecodeError):
            process_bytes(b"garbage" * 100, "audio/wav")

    def test_empty_audio(self):
        """WAV ohne Frames → EmptyBufferError, nichts kodiert."""
        empty = encode_wav(SampleBuffer(np.zeros((0, 1)), 44100))
        with pytest.raises(EmptyBufferError):
            process_bytes(empty, "audio/wav")


class TestProcessFile:
    """Tests für die Dateiverarbeitung."""

    def test_writes_eq_file(self):
        """Ergebnis landet als <name>-EQ<ext> neben der Eingabe."""
        with tempfile.TemporaryDirectory() as tmpdir:
            source = Path(tmpdir) / "take.wav"
            source.write_bytes(wav_bytes(stereo_noise()))

            target = process_file(source)

            assert target == Path(tmpdir) / "take-EQ.wav"
            assert target.exists()
            data, sr = sf.read(target)
            assert sr == 44100
            assert data.shape == (4410, 2)

    def test_explicit_output(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            source = Path(tmpdir) / "take.wav"
            source.write_bytes(wav_bytes(np.zeros(100)))
            out = Path(tmpdir) / "result.wav"

            assert process_file(source, out) == out
            assert out.exists()

    def test_failure_leaves_no_file(self):
        """Fehlgeschlagener Lauf hinterlässt keine (Teil-)Datei."""
        with tempfile.TemporaryDirectory() as tmpdir:
            source = Path(tmpdir) / "broken.wav"
            source.write_bytes(b"not audio" * 100)

            with pytest.raises(DecodeError):
                process_file(source)

            assert sorted(p.name for p in Path(tmpdir).iterdir()) == ["broken.wav"]

    def test_file_not_found(self):
        with pytest.raises(FileNotFoundError):
            process_file("/nonexistent/path/audio.wav")

    def test_unsupported_extension(self):
        with tempfile.NamedTemporaryFile(suffix=".xyz123") as f:
            with pytest.raises(UnsupportedFormatError):
                process_file(f.name)

    def test_oversize(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            source = Path(tmpdir) / "take.wav"
            source.write_bytes(wav_bytes(np.zeros(100)))

            with pytest.raises(OversizeError):
                process_file(source, config=ProcessingConfig(max_file_size=10))


class TestWriteAtomic:
    """Tests für atomares Schreiben."""

    def test_overwrite(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            target = Path(tmpdir) / "out.wav"
            target.write_bytes(b"old")

            write_atomic(target, b"new content")

            assert target.read_bytes() == b"new content"
            assert [p.name for p in Path(tmpdir).iterdir()] == ["out.wav"]

    def test_missing_directory(self):
        with pytest.raises(FileNotFoundError):
            write_atomic("/nonexistent/dir/out.wav", b"data")
