"""Entry point for `python -m virtuoso` or the `virtuoso` console script."""

import argparse
import logging

from virtuoso.config import DEFAULT_TOPIC
from virtuoso.generation import Difficulty, ProceduralSongGenerator


def main() -> None:
    parser = argparse.ArgumentParser(description="Virtuoso: play falling piano notes in time")
    parser.add_argument("--song", default="", help="MIDI file to play instead of the built-in song")
    parser.add_argument("--songs-dir", default="", help="Directory of MIDI files to pick from in the menu")
    parser.add_argument("--soundfont", default=None, help="SoundFont (.sf2) used for note playback")
    parser.add_argument("--topic", default=DEFAULT_TOPIC, help="Initial topic for song generation")
    parser.add_argument(
        "--difficulty",
        choices=[d.value for d in Difficulty],
        default=Difficulty.EASY.value,
        help="Initial difficulty for song generation",
    )
    parser.add_argument("--seed", default=None, help="Seed for the offline song generator")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every judgment")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )

    song = None
    if args.song:
        from virtuoso.song_loader import SongLoadError, load_song
        try:
            song = load_song(args.song)
        except SongLoadError as exc:
            parser.error(str(exc))

    from virtuoso.app import App

    app = App(
        song=song,
        songs_dir=args.songs_dir,
        soundfont=args.soundfont,
        generator=ProceduralSongGenerator(seed=args.seed),
        topic=args.topic,
        difficulty=Difficulty(args.difficulty),
    )
    app.run()


if __name__ == "__main__":
    main()
