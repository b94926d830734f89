"""
Support for running the reporter from scripts and the CLI.

The core reporter types are used like:

    from gistreport import GistReportPipeline

However, the scripting package is not part of the core
pipeline, and contains process-level extensions.

Therefore, the expected usage is as follows:

    from gistreport.scripting import gr_logging

That is, each module whose name starts with `gr_` in this
package is an independent extension module you may want
to optionally load when embedding the reporter.
"""
