"""SubCast: burn machine transcribed subtitles into uploaded videos and stream them."""
