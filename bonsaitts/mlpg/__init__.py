"""Voiced-frame masks and maximum likelihood parameter generation with global variance."""