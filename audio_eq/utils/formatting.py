"""
Formatierungsfunktionen für Anzeige.

Konvertiert numerische Werte in lesbare Strings für Statuszeile und CLI.
"""


def format_time(seconds: float, show_ms: bool = True) -> str:
    """
    Formatiere Zeit in lesbares Format.

    Args:
        seconds: Zeit in Sekunden
        show_ms: Zeige Millisekunden

    Returns:
        Formatierter String (z.B. "1:23.456" oder "1:23")
    """
    if seconds < 0:
        sign = "-"
        seconds = abs(seconds)
    else:
        sign = ""

    minutes = int(seconds // 60)
    secs = seconds % 60

    if show_ms:
        return f"{sign}{minutes}:{secs:06.3f}"
    else:
        return f"{sign}{minutes}:{int(secs):02d}"


def format_frequency(hz: float) -> str:
    """
    Formatiere Frequenz (z.B. "7.4 kHz" oder "170 Hz").
    """
    if hz >= 1000:
        return f"{hz/1000:.1f} kHz"
    else:
        return f"{hz:.0f} Hz"


def format_gain(db: float, precision: int = 1) -> str:
    """
    Formatiere Verstärkung mit Vorzeichen (z.B. "+9.9 dB", "-11.2 dB").
    """
    return f"{db:+.{precision}f} dB"


def format_sample_rate(sr: int) -> str:
    """
    Formatiere Samplerate.

    Returns:
        Formatierter String (z.B. "44.1 kHz" oder "48 kHz")
    """
    if sr % 1000 == 0:
        return f"{sr // 1000} kHz"
    else:
        return f"{sr / 1000:.1f} kHz"


def format_channels(num_channels: int) -> str:
    """
    Formatiere Kanalanzahl.

    Returns:
        "Mono", "Stereo" oder "N channels"
    """
    if num_channels == 1:
        return "Mono"
    elif num_channels == 2:
        return "Stereo"
    else:
        return f"{num_channels} channels"


def format_file_size(num_bytes: int) -> str:
    """
    Formatiere Dateigröße in Binärpräfixen.

    Returns:
        Formatierter String (z.B. "512 B", "3.4 MB", "1.0 GB")
    """
    size = float(num_bytes)
    for unit in ("B", "KB", "MB"):
        if size < 1024:
            if unit == "B":
                return f"{int(size)} B"
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} GB"


def format_filter(config) -> str:
    """
    Einzeilige Beschreibung eines EQ-Filters.

    Returns:
        z.B. "peaking 170 Hz +9.9 dB Q1.76" oder "highshelf 7.4 kHz +10.0 dB"
    """
    text = f"{config.type} {format_frequency(config.freq)} {format_gain(config.gain)}"
    if config.Q is not None:
        text += f" Q{config.Q:g}"
    return text


def format_audio_summary(channels: int, sample_rate: int, seconds: float) -> str:
    """
    Kurzbeschreibung einer Audiodatei für Status und CLI.

    Returns:
        z.B. "Stereo, 44.1 kHz, 0:03.000"
    """
    return (
        f"{format_channels(channels)}, {format_sample_rate(sample_rate)}, "
        f"{format_time(seconds)}"
    )
