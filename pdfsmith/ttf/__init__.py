"""TrueType font reading: table directory, metrics, character maps and kerning."""