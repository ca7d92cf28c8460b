# pdfsmith

Low-level building blocks for producing PDF documents, in pure Python with
no dependencies beyond the standard library (Python 3.10 or newer).

Every PDF object class in the package has a `write(out, obj_id)` method that
writes the object's body to a binary stream. `obj_id` is the object's number,
which the encrypting objects use to derive their RC4 key.

## What is in it

- `pdfsmith.ttf.parser.TTFParser` reads a TrueType font from a file
  (`parse_file`), a stream (`parse_stream`) or bytes (`parse_data`). It covers
  the `head`, `hhea`, `maxp`, `hmtx`, `cmap` (formats 4 and 12), `name`,
  `OS/2`, `post` and `loca` tables. When it is built with `use_kerning=True`
  it also reads a format 0 `kern` table. Malformed fonts raise `TTFError`, and
  a missing required table raises `TableNotFoundError`. `pdfsmith.ttf.tables`
  holds the `TableDirectoryEntry`, `KernTable`, `KernValue` and `FontMap`
  value types and `round_half_away`. `pdfsmith.ttf.ttf_info.TtfInfo` is a
  dict with typed getters, which raise `NoKeyFoundError` or `WrongTypeError`.
- `pdfsmith.subset_font.SubsetFont` loads a font and keeps a record of the
  characters in use (`add_chars`). It maps characters to glyphs
  (`char_code_to_glyph_index`, `char_index`) and gives widths in 1/1000 em
  (`char_width`), scaled metrics (`ascender_px`, `descender_px`,
  `underline_position_px`, `underline_thickness_px`) and kerning pairs
  (`kern_value_by_left`). A character that has no glyph goes to
  `TtfOption.on_glyph_not_found`. `TtfOption.on_glyph_not_found_substitute`
  then replaces it, and by default (`default_glyph_substitute`) that
  replacement is a space. `pdfsmith.ttf_option.TtfOption` holds these options.
- `pdfsmith.font_subsetter.PdfDictionary` builds a TrueType font that holds
  only the glyphs in use, including the components of composite glyphs
  (`make_font`). It writes that font as a Flate-compressed `FontFile2`
  stream. `pdfsmith.subfont_descriptor.SubfontDescriptor` writes the
  `/FontDescriptor`, and `pdfsmith.unicode_map.UnicodeMap` writes the
  ToUnicode CMap.
- `pdfsmith.image_parse.parse_image` / `parse_image_path` read JPEG (gray,
  YCbCr and CMYK) and PNG images into an `ImageInfo`. PNG support covers bit
  depths up to 8, palettes and `tRNS` transparency. The alpha channel of an
  RGBA PNG is split into a separate soft mask. Unsupported or broken images
  raise `ImageFormatError`. `pdfsmith.image_obj.ImageObj` writes an image
  XObject, and `create_smask` gives the matching `pdfsmith.smask.SMask`.
  `SMaskMap` caches soft masks by `SMaskOptions`.
- `pdfsmith.protection.PDFProtection` is the RC4 40-bit standard security
  handler. `set_protection` takes `Permission` flags, `object_key` gives a
  per-object key and `rc4` does the encryption.
- `pdfsmith.pdf_objects` provides `Page` (with external and internal links,
  `LinkOption` and `Anchor`), `Pages`, `ProcSet`, `RelateFonts`,
  `ImportedObj` and `PdfInfo`. `pdfsmith.outlines` provides bookmarks
  (`Outlines`, `Outline`, `OutlineNode`, `parse_outline_nodes`).
  `pdfsmith.page_sizes` defines the standard sizes (`PAGE_SIZE_A4`,
  `PAGE_SIZE_LETTER`, …) and `PageOption`. `pdfsmith.geometry` defines `Rect`
  and `Point`.
- `pdfsmith.transparency` provides `Transparency` (alpha plus `BlendMode`)
  and its cache `TransparencyMap`. `pdfsmith.image_holder` gives image bytes
  an identity (their MD5, or their path). `pdfsmith.glyph_map` provides the
  insertion-ordered `CharacterToGlyphIndex`. `pdfsmith.strhelper` provides
  small helpers such as `string_width`, `parse_style` and the big-endian
  `read_short` / `read_ushort`.

## Examples

Subset a font and measure text:

```python
from pdfsmith.subset_font import SubsetFont
from pdfsmith.ttf_option import TtfOption

font = SubsetFont("MyFont", TtfOption())
font.set_ttf_path("fonts/MyFont.ttf")
text = font.add_chars("Hello")
widths = [font.char_width(ch) for ch in text]
```

Set up encryption. Both passwords are example values:

```python
from pdfsmith.protection import Permission, PDFProtection

user_pass = b"password"
owner_pass = b"secret"
protection = PDFProtection()
protection.set_protection(Permission.PRINT | Permission.COPY, user_pass, owner_pass)
key = protection.object_key(4)
```

Read an image and write it as an XObject:

```python
import io

from pdfsmith.image_obj import ImageObj

image = ImageObj()
image.set_image_path("picture.png")
image.parse()
out = io.BytesIO()
image.write(out, 5)
```

Write the page tree root:

```python
import io

from pdfsmith.page_sizes import PAGE_SIZE_A4
from pdfsmith.pdf_objects import Pages

out = io.BytesIO()
Pages(page_size=PAGE_SIZE_A4, page_count=1, kids="3 0 R").write(out, 2)
```

## What it does not do

The package writes the bodies of individual objects. It has no document
class that numbers the objects, writes the catalog, the `obj`/`endobj`
wrappers, the cross-reference table and the trailer, or draws text and
graphics into page content streams. The caller assembles these parts. There
is also no command-line tool.

## Running the tests

```
pip install -e .[test]
pytest
```