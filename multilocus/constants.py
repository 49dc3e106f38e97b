# -*- coding: utf-8 -*-


HAPLOID = 1

DIPLOID = 2

# reserved allele symbols, both treated as missing data
MISSING_UNKNOWN = '?'

MISSING_GAP = '-'

MISSING_SYMBOLS = (MISSING_UNKNOWN, MISSING_GAP)

# integer codes used for missing symbols in the allele code arrays
CODE_UNKNOWN = -1

CODE_GAP = -2

# columns in the input data
COLUMN_DELIMITER = '\t'

ALLELE_DELIMITER = '/'

COMMENT_DELIMITER = '#'

# report progress every n replicates
PROGRESS_STEP = 10

# partition search is slow, report more often
PARTITION_PROGRESS_STEP = 2

# which way a replicate value must fall to count towards a p-value
GREATER = 'greater'

LESS = 'less'

EXTREME = 'extreme'

# whether cells holding missing data take part in shuffles
MISSING_FIXED = 'fixed'

MISSING_FREE = 'free'
