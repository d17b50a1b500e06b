import argparse
import os
import sys

from rich.console import Console

from config.settings import SettingsManager
from filters.errors import InvalidInputError
from services import SketchConverter
from utils.file_manager import FileManager

# 표준 입출력 인코딩을 utf-8로 강제 설정
os.environ["PYTHONIOENCODING"] = "utf-8"

# fmt: off
from rich.traceback import install

install(show_locals=True)  # 변수 값 표시 옵션 켜기
# fmt: on

console = Console()


def _ranged(settings, name, cast):
    """설정된 범위 안의 값만 허용하는 argparse 타입 생성"""
    low, high = settings.get_range(name)

    def parse(text):
        try:
            value = cast(text)
        except ValueError:
            raise argparse.ArgumentTypeError(f"숫자가 아닙니다: {text}")
        if not low <= value <= high:
            raise argparse.ArgumentTypeError(f"{name}은(는) {low}에서 {high} 사이여야 합니다")
        return value

    return parse


def build_parser(settings):
    defaults = settings.get_sketch_defaults()
    styles = ["pencil", "outline", "charcoal", "soft"]

    parser = argparse.ArgumentParser(
        prog="sketch-magic", description="사진을 연필/윤곽선/숯/부드러운 스케치로 변환합니다"
    )
    parser.add_argument("input", help="입력 이미지 파일")
    parser.add_argument("-o", "--output", help="출력 PNG 경로 (기본: sketch-magic.png)")
    parser.add_argument("--style", default=defaults["style"], help=f"스타일: {', '.join(styles)}")
    parser.add_argument(
        "--blur", type=_ranged(settings, "blur_radius", int), default=defaults["blur_radius"]
    )
    parser.add_argument(
        "--edge", type=_ranged(settings, "edge_strength", float), default=defaults["edge_strength"]
    )
    parser.add_argument(
        "--contrast", type=_ranged(settings, "contrast", float), default=defaults["contrast"]
    )
    parser.add_argument(
        "--full-size", action="store_true", help="표시 크기(500x500)로 줄이지 않고 원본 크기로 변환"
    )
    return parser


def main(argv=None):
    settings = SettingsManager()
    args = build_parser(settings).parse_args(argv)

    file_manager = FileManager(settings)
    try:
        image = file_manager.load_image(args.input)
    except InvalidInputError as e:
        console.print(f"[red]{e}[/red]")
        return 1

    if not args.full_size:
        image = file_manager.fit_to_display(image)

    height, width = image.shape[:2]
    converter = SketchConverter(settings=settings)

    with console.status("스케치 변환 중..."):
        result = converter.convert(
            image,
            width,
            height,
            style=args.style,
            blur_radius=args.blur,
            edge_strength=args.edge,
            contrast=args.contrast,
        )

    if not result.success:
        console.print(f"[red]{result.error}[/red]")
        return 1

    output_path = file_manager.save_image(result.image, args.output)
    console.print(
        f"[green]스케치 생성 완료[/green] ({result.style}, {width}x{height}, "
        f"{result.elapsed:.2f}초) → {output_path}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
